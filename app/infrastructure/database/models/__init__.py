# app/infrastructure/database/models/__init__.py
# importa todos os models para registrá-los no metadata

from app.infrastructure.database.models.user_model import UserModel  # noqa: F401
from app.infrastructure.database.models.category_model import CategoryModel  # noqa: F401
from app.infrastructure.database.models.service_model import ServiceModel  # noqa: F401
from app.infrastructure.database.models.work_location_model import WorkLocationModel  # noqa: F401
from app.infrastructure.database.models.request_model import RequestModel  # noqa: F401
from app.infrastructure.database.models.counter_model import CounterModel  # noqa: F401
from app.infrastructure.database.models.notification_model import NotificationModel  # noqa: F401
from app.infrastructure.database.models.audit_log_model import AuditLogModel  # noqa: F401

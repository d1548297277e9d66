# app/core/audit/audit_entities.py

class AuditEntity:
    REQUEST = "request"
    SERVICE = "service"
    LOCATION = "work_location"
    NOTIFICATION = "notification"
    USER = "user"

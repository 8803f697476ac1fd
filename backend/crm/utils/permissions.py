"""CRM 역할 상수와 역할 묶음을 정의합니다."""

SUPER_ADMIN = "SUPER_ADMIN"
ADMIN = "ADMIN"
MODERATOR = "MODERATOR"
SUPPORT = "SUPPORT"
MANAGER = "MANAGER"
TECHNOLOGIST = "TECHNOLOGIST"
BRIGADIER = "BRIGADIER"
LEAD_SPECIALIST_FURNITURE = "LEAD_SPECIALIST_FURNITURE"
LEAD_SPECIALIST_WINDOWS_DOORS = "LEAD_SPECIALIST_WINDOWS_DOORS"
SURVEYOR = "SURVEYOR"
DRIVER = "DRIVER"
INSTALLER = "INSTALLER"
CUSTOMER = "CUSTOMER"  # 스토어프론트 고객. CRM 접근 불가

CRM_ROLES = (
    SUPER_ADMIN,
    ADMIN,
    MODERATOR,
    SUPPORT,
    MANAGER,
    TECHNOLOGIST,
    BRIGADIER,
    LEAD_SPECIALIST_FURNITURE,
    LEAD_SPECIALIST_WINDOWS_DOORS,
    SURVEYOR,
    DRIVER,
    INSTALLER,
)
ADMIN_ROLES = (SUPER_ADMIN, ADMIN)

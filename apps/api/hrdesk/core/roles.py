class Role:
    Admin = "Admin"
    User = "User"


STATUS_ACTIVE = "Active"
STATUS_INACTIVE = "Inactive"

"""
Roles and Permissions Configuration
Defines the permission matrix for every module and which profile roles
(`profiles.role`) are granted which permissions.
Used by route dependencies (require_permission) and the /auth/me endpoint.
"""

# Define modules and their actions
MODULES = {
    "films": {
        "resource": "films",
        "actions": ["read", "create"],
        "description": "Film catalogue"
    },
    "comments": {
        "resource": "comments",
        "actions": ["read", "create", "moderate"],
        "description": "Film comments and ratings"
    },
    "collections": {
        "resource": "collections",
        "actions": ["read", "manage"],
        "description": "Curated film collections"
    },
    "events": {
        "resource": "events",
        "actions": ["read", "register", "create", "manage"],
        "description": "Community events and registrations"
    },
    "forum": {
        "resource": "forum",
        "actions": ["read", "create", "moderate"],
        "description": "Forum discussions and posts"
    },
    "uploads": {
        "resource": "uploads",
        "actions": ["avatar", "media"],
        "description": "Storage bucket uploads"
    },
    "moderation": {
        "resource": "moderation",
        "actions": ["read", "ban", "lock", "pin"],
        "description": "Community moderation"
    },
    "users": {
        "resource": "users",
        "actions": ["assign_role"],
        "description": "User role management"
    }
}

# Every signed-in member gets these
MEMBER_PERMISSIONS = [
    "films:read", "films:create",
    "comments:read", "comments:create",
    "collections:read",
    "events:read", "events:register",
    "forum:read", "forum:create",
    "uploads:avatar",
]

# Role definitions; "*" grants every permission in the matrix
ROLE_TYPES = {
    "user": {
        "grants": [],
        "description": "Community member"
    },
    "curator": {
        "grants": ["events:create", "uploads:media"],
        "description": "Curates films and hosts events"
    },
    "moderator": {
        "grants": [
            "comments:moderate", "forum:moderate",
            "moderation:read", "moderation:ban", "moderation:lock", "moderation:pin",
        ],
        "description": "Moderates community content"
    },
    "admin": {
        "grants": ["*"],
        "description": "Full administrative access"
    }
}

VALID_ROLES = list(ROLE_TYPES.keys())
MODERATOR_ROLES = ["moderator", "admin"]

# Storage buckets accepted by the upload endpoints and the permission each needs
BUCKET_PERMISSIONS = {
    "films": "uploads:media",
    "posters": "uploads:media",
    "thumbnails": "uploads:media",
    "events": "uploads:media",
    "avatars": "uploads:avatar",
}

# Additional descriptions for specific permissions
PERMISSION_DESCRIPTIONS = {
    "comments:moderate": "Delete other members' comments",
    "forum:moderate": "Delete other members' discussions and posts",
    "events:manage": "Edit and delete events hosted by others",
    "collections:manage": "Create, edit and delete collections",
    "uploads:media": "Upload to film, poster, thumbnail and event buckets",
    "users:assign_role": "Change member roles",
}


def get_role_matrix():
    """
    Returns a dictionary with all permissions and the permissions of each role
    Format: {
        "permissions": [
            {"name": "films:read", "resource": "films", "action": "read", "description": "..."},
            ...
        ],
        "roles": [
            {"name": "curator", "description": "...", "permissions": ["events:create", ...]},
            ...
        ]
    }
    """
    permissions = []
    roles = []

    for module_config in MODULES.values():
        resource = module_config["resource"]
        for action in module_config["actions"]:
            permission_name = f"{resource}:{action}"
            permissions.append({
                "name": permission_name,
                "resource": resource,
                "action": action,
                "description": PERMISSION_DESCRIPTIONS.get(
                    permission_name, f"{action.capitalize()} {resource}"
                )
            })

    all_names = [p["name"] for p in permissions]

    for role_name, role_config in ROLE_TYPES.items():
        if "*" in role_config["grants"]:
            role_permissions = set(all_names)
        else:
            role_permissions = set(MEMBER_PERMISSIONS) | set(role_config["grants"])
        roles.append({
            "name": role_name,
            "description": role_config["description"],
            "permissions": sorted(role_permissions)
        })

    return {
        "permissions": permissions,
        "roles": roles
    }


ROLE_MATRIX = get_role_matrix()
ROLE_PERMISSIONS = {role["name"]: set(role["permissions"]) for role in ROLE_MATRIX["roles"]}


def role_has_permission(role: str, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(role or "user", set())


def is_moderator_role(role: str) -> bool:
    return role in MODERATOR_ROLES

"""Permission catalog and system role templates.

``seed_catalog`` writes these into the database; tenant creation then
clones the templates. Keys in ``TENANT_ADMIN_KEYS`` are not part of the
catalog: they are decided by a role's tenant-admin flag alone and can never
be granted through a role-permission link.
"""

PERMISSIONS_BY_MODULE: dict[str, list[tuple[str, str]]] = {
    "Candidates": [
        ("candidate.create", "Create new candidates"),
        ("candidate.read", "View candidates"),
        ("candidate.update", "Edit candidate information"),
        ("candidate.delete", "Delete candidates"),
    ],
    "Vendors": [
        ("vendor.create", "Create new vendors"),
        ("vendor.read", "View vendors"),
        ("vendor.update", "Edit vendor information"),
        ("vendor.delete", "Delete vendors"),
    ],
    "Clients": [
        ("client.create", "Create new clients"),
        ("client.read", "View clients"),
        ("client.update", "Edit client information"),
        ("client.delete", "Delete clients"),
    ],
    "Jobs": [
        ("job.create", "Create job requirements"),
        ("job.read", "View job requirements"),
        ("job.update", "Edit job requirements"),
        ("job.delete", "Delete job requirements"),
    ],
    "Submissions": [
        ("submission.create", "Submit candidates for jobs"),
        ("submission.read", "View submissions"),
        ("submission.update", "Edit submissions"),
        ("submission.delete", "Delete submissions"),
    ],
    "Interviews": [
        ("interview.create", "Schedule interviews"),
        ("interview.read", "View interviews"),
        ("interview.update", "Update interview details"),
        ("interview.delete", "Delete interviews"),
    ],
    "Projects": [
        ("project.create", "Create new projects"),
        ("project.read", "View projects"),
        ("project.update", "Edit project details"),
        ("project.delete", "Delete projects"),
    ],
    "Timesheets": [
        ("timesheet.create", "Create timesheets"),
        ("timesheet.read", "View timesheets"),
        ("timesheet.update", "Edit timesheets"),
        ("timesheet.approve", "Approve timesheets"),
    ],
    "Invoices": [
        ("invoice.create", "Create invoices"),
        ("invoice.read", "View invoices"),
        ("invoice.update", "Edit invoices"),
        ("invoice.delete", "Delete invoices"),
    ],
    "Immigration": [
        ("immigration.create", "Create immigration records"),
        ("immigration.read", "View immigration records"),
        ("immigration.update", "Update immigration records"),
    ],
    "Users & Roles": [
        ("user.create", "Create new users"),
        ("user.read", "View users"),
        ("user.update", "Edit user information"),
        ("user.delete", "Delete users"),
        ("roles.read", "View roles and their permissions"),
    ],
    "Settings": [
        ("settings.manage", "Manage team settings"),
        ("audit.view", "View audit logs"),
        ("reports.view", "View reports"),
    ],
}

# Governed by Role.is_tenant_admin, never by role-permission links
MEMBERSHIPS_APPROVE = "memberships.approve"
MEMBERSHIPS_REJECT = "memberships.reject"
MEMBERSHIPS_VIEW_PENDING = "memberships.view_pending"
ROLES_MANAGE = "roles.manage"
MEMBERS_MANAGE = "members.manage"
TENANT_MANAGE = "tenant.manage"

TENANT_ADMIN_KEYS: frozenset[str] = frozenset(
    {
        MEMBERSHIPS_APPROVE,
        MEMBERSHIPS_REJECT,
        MEMBERSHIPS_VIEW_PENDING,
        ROLES_MANAGE,
        MEMBERS_MANAGE,
        TENANT_MANAGE,
    }
)

ROLES_READ = "roles.read"
USERS_READ = "user.read"
AUDIT_VIEW = "audit.view"

ALL_PERMISSION_KEYS: list[str] = [
    key for perms in PERMISSIONS_BY_MODULE.values() for key, _ in perms
]

LOCAL_ADMIN_TEMPLATE = "Local Admin"

# (name, description, is_tenant_admin, permission keys)
ROLE_TEMPLATES: list[tuple[str, str, bool, list[str]]] = [
    (
        LOCAL_ADMIN_TEMPLATE,
        "Admin for their team with full team-scoped access",
        True,
        ALL_PERMISSION_KEYS,
    ),
    (
        "Sales Manager",
        "Manage candidates, vendors, clients, and job placements",
        False,
        [
            "candidate.create", "candidate.read", "candidate.update",
            "vendor.read", "vendor.update",
            "client.read", "client.update",
            "job.read",
            "submission.create", "submission.read", "submission.update",
            "interview.read", "interview.update",
            "project.read",
            "reports.view",
        ],
    ),
    (
        "Manager",
        "General access to candidates, vendors, clients and projects",
        False,
        [
            "candidate.create", "candidate.read", "candidate.update",
            "vendor.read", "client.read", "job.read", "submission.read",
            "interview.read", "project.read", "timesheet.read",
            "reports.view", "roles.read",
        ],
    ),
    (
        "Recruiter",
        "Manage candidates and submissions",
        False,
        [
            "candidate.create", "candidate.read", "candidate.update",
            "job.read",
            "submission.create", "submission.read", "submission.update",
            "interview.create", "interview.read", "interview.update",
        ],
    ),
    (
        "Finance",
        "Manage invoices, timesheets, and financial reports",
        False,
        [
            "timesheet.read", "timesheet.approve",
            "invoice.create", "invoice.read", "invoice.update",
            "project.read",
            "reports.view",
        ],
    ),
    (
        "View-Only",
        "Read-only access to all core modules",
        False,
        [
            "candidate.read", "vendor.read", "client.read", "job.read",
            "submission.read", "interview.read", "project.read",
            "timesheet.read", "invoice.read", "immigration.read",
            "reports.view",
        ],
    ),
]

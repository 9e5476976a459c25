# accounts/permission_defaults.py

ACCOUNTANT_CODES = {
    # Reference data
    "branches.view",
    "settings.view",
    "discount_reasons.view",

    # Money in / out
    "transactions.view",
    "transactions.create",
    "transactions.edit",
    "transactions.delete",

    # Parties and balances
    "contacts.view",
    "contacts.manage",
    "payables.view",
    "payables.manage",
    "payables.pay",
    "receivables.view",
    "receivables.manage",
    "receivables.collect",
    "debts.view",
    "debts.manage",

    # Stock
    "inventory.view",
    "inventory.manage",

    # Staff
    "employees.view",
    "employees.manage",
    "payroll.manage",

    # Notifications
    "notifications.view",
    "notifications.manage_settings",

    # Reports
    "dashboard.view",
    "reports.view",
    "reports.execute",
    "reports.export",
}

ADMIN_ONLY_CODES = {
    "users.manage",
    "branches.manage",
    "settings.manage",
    "audit.view",
    "reports.manage_templates",
    "discount_reasons.manage",
    "notifications.run_checks",
}

ROLE_DEFAULTS = {
    "ADMIN": ACCOUNTANT_CODES | ADMIN_ONLY_CODES,
    "ACCOUNTANT": set(ACCOUNTANT_CODES),
}

ALL_PERMISSION_CODES = sorted(ACCOUNTANT_CODES | ADMIN_ONLY_CODES)

"""
Default chart of accounts.

Account codes follow the standard numbering:
    1000-1999  Assets
    2000-2999  Liabilities
    3000-3999  Equity
    4000-4999  Revenue
    5000-5999  Expenses

The type of an account determines its normal balance: asset and
expense accounts increase with a debit, the others with a credit.
"""

from typing import NamedTuple

from factoryflow.models.enums import AccountType, NormalBalance


class AccountCodes:
    # Assets
    CASH = "1000"
    BANK = "1100"
    ACCOUNTS_RECEIVABLE = "1200"
    INVENTORY = "1300"
    SUPPLIER_ADVANCES = "1350"
    PREPAID_EXPENSES = "1400"
    FIXED_ASSETS = "1500"
    ACCUMULATED_DEPRECIATION = "1510"
    LOANS_RECEIVABLE = "1600"

    # Liabilities
    ACCOUNTS_PAYABLE = "2000"
    ACCRUED_EXPENSES = "2100"
    CUSTOMER_ADVANCES = "2150"
    NOTES_PAYABLE = "2200"
    LOANS_PAYABLE = "2300"
    VAT_PAYABLE = "2400"

    # Equity
    OWNER_CAPITAL = "3000"
    OWNER_DRAWINGS = "3100"
    RETAINED_EARNINGS = "3200"

    # Revenue
    SALES_REVENUE = "4000"
    SERVICE_REVENUE = "4100"
    OTHER_INCOME = "4200"
    SALES_DISCOUNT = "4300"

    # Expenses
    COST_OF_GOODS_SOLD = "5000"
    PURCHASE_DISCOUNT = "5050"
    SALARIES_EXPENSE = "5100"
    RENT_EXPENSE = "5200"
    UTILITIES_EXPENSE = "5300"
    DEPRECIATION_EXPENSE = "5400"
    MAINTENANCE_EXPENSE = "5410"
    MARKETING_EXPENSE = "5420"
    OFFICE_SUPPLIES = "5430"
    TRANSPORTATION_EXPENSE = "5440"
    TRAVEL_EXPENSE = "5445"
    ADMIN_EXPENSE = "5450"
    COMMUNICATIONS_EXPENSE = "5460"
    SMALL_EQUIPMENT = "5470"
    PROFESSIONAL_FEES = "5480"
    INSURANCE_EXPENSE = "5490"
    OTHER_EXPENSES = "5500"
    TAXES_EXPENSE = "5510"
    LOAN_INTEREST_EXPENSE = "5520"
    MISC_EXPENSES = "5530"
    BAD_DEBT_EXPENSE = "5600"


ACCOUNT_CODE_RANGES: dict[AccountType, tuple[int, int]] = {
    AccountType.ASSET: (1000, 1999),
    AccountType.LIABILITY: (2000, 2999),
    AccountType.EQUITY: (3000, 3999),
    AccountType.REVENUE: (4000, 4999),
    AccountType.EXPENSE: (5000, 5999),
}

# Accounts whose balance is reported as a reduction of their section
CONTRA_ASSET_CODES = {AccountCodes.ACCUMULATED_DEPRECIATION}


class AccountDefinition(NamedTuple):
    code: str
    name: str
    name_ar: str
    account_type: AccountType
    parent_code: str | None = None
    description: str | None = None


_C = AccountCodes
_A = AccountType

DEFAULT_ACCOUNTS: list[AccountDefinition] = [
    # --- Assets ---
    AccountDefinition(_C.CASH, "Cash", "النقدية", _A.ASSET,
                      description="Cash on hand and in registers"),
    AccountDefinition(_C.BANK, "Bank", "البنك", _A.ASSET,
                      description="Bank accounts"),
    AccountDefinition(_C.ACCOUNTS_RECEIVABLE, "Accounts Receivable",
                      "ذمم مدينة", _A.ASSET,
                      description="Amounts owed by customers"),
    AccountDefinition(_C.INVENTORY, "Inventory", "المخزون", _A.ASSET,
                      description="Raw materials and finished goods"),
    AccountDefinition(_C.SUPPLIER_ADVANCES, "Supplier Advances",
                      "سلفات موردين", _A.ASSET),
    AccountDefinition(_C.PREPAID_EXPENSES, "Prepaid Expenses",
                      "مصاريف مدفوعة مقدماً", _A.ASSET),
    AccountDefinition(_C.FIXED_ASSETS, "Fixed Assets", "الأصول الثابتة",
                      _A.ASSET, description="Property, plant, and equipment"),
    AccountDefinition("1501", "Machinery & Equipment", "آلات ومعدات",
                      _A.ASSET, _C.FIXED_ASSETS),
    AccountDefinition("1502", "Vehicles", "مركبات", _A.ASSET,
                      _C.FIXED_ASSETS),
    AccountDefinition("1503", "Furniture & Fixtures", "أثاث وتجهيزات",
                      _A.ASSET, _C.FIXED_ASSETS),
    AccountDefinition("1504", "Buildings", "مباني", _A.ASSET,
                      _C.FIXED_ASSETS),
    AccountDefinition("1505", "Land", "أراضي", _A.ASSET, _C.FIXED_ASSETS),
    # Contra-asset, kept in the asset range
    AccountDefinition(_C.ACCUMULATED_DEPRECIATION, "Accumulated Depreciation",
                      "مجمع الإهلاك", _A.ASSET, _C.FIXED_ASSETS),
    AccountDefinition(_C.LOANS_RECEIVABLE, "Loans Receivable",
                      "قروض ممنوحة", _A.ASSET),

    # --- Liabilities ---
    AccountDefinition(_C.ACCOUNTS_PAYABLE, "Accounts Payable", "ذمم دائنة",
                      _A.LIABILITY, description="Amounts owed to suppliers"),
    AccountDefinition(_C.ACCRUED_EXPENSES, "Accrued Expenses",
                      "مصاريف مستحقة", _A.LIABILITY),
    AccountDefinition(_C.CUSTOMER_ADVANCES, "Customer Advances",
                      "سلفات عملاء", _A.LIABILITY),
    AccountDefinition(_C.NOTES_PAYABLE, "Notes Payable", "أوراق دفع",
                      _A.LIABILITY),
    AccountDefinition(_C.LOANS_PAYABLE, "Loans Payable", "قروض مستحقة",
                      _A.LIABILITY),
    AccountDefinition(_C.VAT_PAYABLE, "VAT Payable",
                      "ضريبة المبيعات المستحقة", _A.LIABILITY),

    # --- Equity ---
    AccountDefinition(_C.OWNER_CAPITAL, "Owner's Capital", "رأس المال",
                      _A.EQUITY),
    AccountDefinition(_C.OWNER_DRAWINGS, "Owner's Drawings",
                      "سحوبات المالك", _A.EQUITY),
    AccountDefinition(_C.RETAINED_EARNINGS, "Retained Earnings",
                      "الأرباح المحتجزة", _A.EQUITY),

    # --- Revenue ---
    AccountDefinition(_C.SALES_REVENUE, "Sales Revenue", "إيرادات المبيعات",
                      _A.REVENUE),
    AccountDefinition("4010", "Product Sales", "مبيعات منتجات", _A.REVENUE,
                      _C.SALES_REVENUE),
    AccountDefinition(_C.SERVICE_REVENUE, "Service Revenue",
                      "إيرادات الخدمات", _A.REVENUE),
    AccountDefinition("4110", "Service Sales", "مبيعات خدمات", _A.REVENUE,
                      _C.SERVICE_REVENUE),
    AccountDefinition(_C.OTHER_INCOME, "Other Income", "إيرادات أخرى",
                      _A.REVENUE),
    AccountDefinition("4210", "Bank Interest Income", "فوائد بنكية",
                      _A.REVENUE, _C.OTHER_INCOME),
    AccountDefinition("4220", "Asset Sale Income", "بيع أصول", _A.REVENUE,
                      _C.OTHER_INCOME),
    AccountDefinition("4230", "Miscellaneous Income", "إيرادات متنوعة",
                      _A.REVENUE, _C.OTHER_INCOME),
    AccountDefinition(_C.SALES_DISCOUNT, "Sales Discount", "خصم المبيعات",
                      _A.REVENUE),

    # --- Expenses ---
    AccountDefinition(_C.COST_OF_GOODS_SOLD, "Cost of Goods Sold",
                      "تكلفة البضاعة المباعة", _A.EXPENSE),
    AccountDefinition("5010", "Raw Materials", "مواد خام", _A.EXPENSE,
                      _C.COST_OF_GOODS_SOLD),
    AccountDefinition("5020", "Shipping & Freight", "شحن", _A.EXPENSE,
                      _C.COST_OF_GOODS_SOLD),
    AccountDefinition("5030", "Purchased Goods", "شراء بضاعة جاهزة",
                      _A.EXPENSE, _C.COST_OF_GOODS_SOLD),
    AccountDefinition(_C.PURCHASE_DISCOUNT, "Purchase Discount",
                      "خصم المشتريات", _A.EXPENSE),
    AccountDefinition(_C.SALARIES_EXPENSE, "Salaries Expense",
                      "مصاريف الرواتب", _A.EXPENSE),
    AccountDefinition(_C.RENT_EXPENSE, "Rent Expense", "مصاريف الإيجار",
                      _A.EXPENSE),
    AccountDefinition(_C.UTILITIES_EXPENSE, "Utilities Expense",
                      "مصاريف المرافق", _A.EXPENSE),
    AccountDefinition("5310", "Electricity & Water", "كهرباء وماء",
                      _A.EXPENSE, _C.UTILITIES_EXPENSE),
    AccountDefinition(_C.DEPRECIATION_EXPENSE, "Depreciation Expense",
                      "مصاريف الإهلاك", _A.EXPENSE),
    AccountDefinition(_C.MAINTENANCE_EXPENSE, "Maintenance Expense",
                      "مصاريف صيانة", _A.EXPENSE),
    AccountDefinition(_C.MARKETING_EXPENSE, "Marketing Expense",
                      "مصاريف تسويق", _A.EXPENSE),
    AccountDefinition(_C.OFFICE_SUPPLIES, "Office Supplies", "قرطاسية",
                      _A.EXPENSE),
    AccountDefinition(_C.TRANSPORTATION_EXPENSE, "Transportation Expense",
                      "وقود ومواصلات", _A.EXPENSE),
    AccountDefinition(_C.TRAVEL_EXPENSE, "Travel Expense", "سفر وضيافة",
                      _A.EXPENSE),
    AccountDefinition(_C.ADMIN_EXPENSE, "Administrative Expense",
                      "مصاريف إدارية", _A.EXPENSE),
    AccountDefinition(_C.COMMUNICATIONS_EXPENSE, "Communications Expense",
                      "اتصالات وإنترنت", _A.EXPENSE),
    AccountDefinition(_C.SMALL_EQUIPMENT, "Small Equipment",
                      "أدوات ومعدات صغيرة", _A.EXPENSE),
    AccountDefinition(_C.PROFESSIONAL_FEES, "Professional Fees",
                      "مصاريف قانونية ومهنية", _A.EXPENSE),
    AccountDefinition(_C.INSURANCE_EXPENSE, "Insurance Expense", "تأمينات",
                      _A.EXPENSE),
    AccountDefinition(_C.OTHER_EXPENSES, "Other Expenses", "مصاريف أخرى",
                      _A.EXPENSE),
    AccountDefinition(_C.TAXES_EXPENSE, "Taxes", "ضرائب ورسوم", _A.EXPENSE,
                      _C.OTHER_EXPENSES),
    AccountDefinition(_C.LOAN_INTEREST_EXPENSE, "Loan Interest",
                      "فوائد قروض", _A.EXPENSE, _C.OTHER_EXPENSES),
    AccountDefinition(_C.MISC_EXPENSES, "Miscellaneous Expenses",
                      "مصاريف متنوعة", _A.EXPENSE, _C.OTHER_EXPENSES),
    AccountDefinition(_C.BAD_DEBT_EXPENSE, "Bad Debt Expense",
                      "مصروف ديون معدومة", _A.EXPENSE),
]

_BY_CODE = {account.code: account for account in DEFAULT_ACCOUNTS}


def get_normal_balance(account_type: AccountType) -> NormalBalance:
    if account_type in (AccountType.ASSET, AccountType.EXPENSE):
        return NormalBalance.DEBIT
    return NormalBalance.CREDIT


def get_account_type_from_code(code: str) -> AccountType:
    """
    Classify an account by its numeric code.

    Non-numeric and out-of-range codes fall back to EXPENSE,
    so an unknown account never inflates assets or revenue.
    """
    try:
        number = int(code)
    except (TypeError, ValueError):
        return AccountType.EXPENSE

    for account_type, (low, high) in ACCOUNT_CODE_RANGES.items():
        if low <= number <= high:
            return account_type
    return AccountType.EXPENSE


def is_contra_asset(code: str) -> bool:
    return code in CONTRA_ASSET_CODES


def get_default_account(code: str) -> AccountDefinition | None:
    return _BY_CODE.get(code)


def get_default_account_name(code: str) -> str:
    """English name for a default account, or the code itself."""
    account = _BY_CODE.get(code)
    return account.name if account else code


def get_default_accounts_by_type(
    account_type: AccountType,
) -> list[AccountDefinition]:
    return [a for a in DEFAULT_ACCOUNTS if a.account_type == account_type]


def get_parent_accounts() -> list[AccountDefinition]:
    return [a for a in DEFAULT_ACCOUNTS if a.parent_code is None]


def get_child_accounts(parent_code: str) -> list[AccountDefinition]:
    return [a for a in DEFAULT_ACCOUNTS if a.parent_code == parent_code]

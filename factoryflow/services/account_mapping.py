"""
Category-to-account mapping.

Translates what the user records (an income in "مبيعات", an
expense in "رواتب") into the debit and credit accounts of the
journal entry generated for it. Category names are the Arabic
labels used by the application's forms.

Double-entry rules:
    Income          DR Accounts Receivable (or Cash)   CR Revenue
    Expense         DR Expense                         CR Accounts Payable (or Cash)
    Owner capital   DR Cash                            CR Owner's Capital
    Owner drawings  DR Owner's Drawings                CR Cash
"""

from typing import NamedTuple

from factoryflow.models.enums import TransactionType, PaymentType
from factoryflow.services.chart_of_accounts import AccountCodes


class AccountMapping(NamedTuple):
    debit_account: str
    credit_account: str


CATEGORY_TO_EXPENSE_ACCOUNT: dict[str, str] = {
    # Cost of goods sold
    "تكلفة البضاعة المباعة (COGS)": AccountCodes.COST_OF_GOODS_SOLD,
    "مواد خام": "5010",
    "شحن": "5020",
    "نقل بضاعة": "5020",
    "شراء بضاعة جاهزة": "5030",
    "هدر وتالف": AccountCodes.COST_OF_GOODS_SOLD,
    "عينات مجانية": AccountCodes.COST_OF_GOODS_SOLD,

    # Operating expenses
    "مصاريف تشغيلية": AccountCodes.OTHER_EXPENSES,
    "رواتب": AccountCodes.SALARIES_EXPENSE,
    "رواتب وأجور": AccountCodes.SALARIES_EXPENSE,
    "إيجار": AccountCodes.RENT_EXPENSE,
    "إيجارات": AccountCodes.RENT_EXPENSE,
    "كهرباء وماء": "5310",
    "صيانة": AccountCodes.MAINTENANCE_EXPENSE,
    "تسويق": AccountCodes.MARKETING_EXPENSE,
    "تسويق وإعلان": AccountCodes.MARKETING_EXPENSE,
    "قرطاسية": AccountCodes.OFFICE_SUPPLIES,
    "مصاريف مكتبية": AccountCodes.OFFICE_SUPPLIES,
    "مستهلكات": AccountCodes.OFFICE_SUPPLIES,
    "وقود ومواصلات": AccountCodes.TRANSPORTATION_EXPENSE,
    "رحلة عمل": AccountCodes.TRAVEL_EXPENSE,
    "مصاريف إدارية": AccountCodes.ADMIN_EXPENSE,
    "اتصالات وإنترنت": AccountCodes.COMMUNICATIONS_EXPENSE,
    "أدوات ومعدات صغيرة": AccountCodes.SMALL_EQUIPMENT,

    # General expenses
    "مصاريف عامة": AccountCodes.OTHER_EXPENSES,
    "مصاريف أخرى": AccountCodes.MISC_EXPENSES,
    "مصاريف متنوعة": AccountCodes.MISC_EXPENSES,
    "مصاريف قانونية": AccountCodes.PROFESSIONAL_FEES,
    "تأمينات": AccountCodes.INSURANCE_EXPENSE,
    "ضرائب": AccountCodes.TAXES_EXPENSE,
    "ضرائب ورسوم": AccountCodes.TAXES_EXPENSE,
    "فوائد قروض": AccountCodes.LOAN_INTEREST_EXPENSE,
}

CATEGORY_TO_REVENUE_ACCOUNT: dict[str, str] = {
    "مبيعات": AccountCodes.SALES_REVENUE,
    "مبيعات منتجات": "4010",
    "مبيعات خدمات": "4110",
    "مبيعات أخرى": AccountCodes.SALES_REVENUE,
    "إيرادات أخرى": AccountCodes.OTHER_INCOME,
    "فوائد بنكية": "4210",
    "بيع أصول": "4220",
    "إيرادات متنوعة": "4230",
}

OWNER_DRAWINGS_CATEGORY = "سحوبات المالك"

EQUITY_CATEGORIES: dict[str, str] = {
    "رأس المال": AccountCodes.OWNER_CAPITAL,
    "رأس مال مالك": AccountCodes.OWNER_CAPITAL,
    OWNER_DRAWINGS_CATEGORY: AccountCodes.OWNER_DRAWINGS,
}


def is_equity_category(category: str, subcategory: str | None = None) -> bool:
    return category in EQUITY_CATEGORIES or (
        subcategory is not None and subcategory in EQUITY_CATEGORIES
    )


def get_mapping_for_ledger_entry(
    entry_type: TransactionType,
    category: str,
    subcategory: str | None = None,
    is_arap_entry: bool = False,
    immediate_settlement: bool = False,
) -> AccountMapping:
    """
    Pick the debit and credit accounts for a ledger entry.

    The subcategory wins over the category when both are mapped.
    AR/AP entries that are not settled immediately go through
    Accounts Receivable / Accounts Payable instead of Cash.
    """
    specific = subcategory or category

    if entry_type == TransactionType.CAPITAL or is_equity_category(
        category, subcategory
    ):
        if OWNER_DRAWINGS_CATEGORY in (category, subcategory):
            return AccountMapping(AccountCodes.OWNER_DRAWINGS, AccountCodes.CASH)
        equity_account = (
            EQUITY_CATEGORIES.get(specific)
            or EQUITY_CATEGORIES.get(category)
            or AccountCodes.OWNER_CAPITAL
        )
        return AccountMapping(AccountCodes.CASH, equity_account)

    on_account = is_arap_entry and not immediate_settlement

    if entry_type == TransactionType.INCOME:
        revenue_account = (
            CATEGORY_TO_REVENUE_ACCOUNT.get(specific)
            or CATEGORY_TO_REVENUE_ACCOUNT.get(category)
            or AccountCodes.SALES_REVENUE
        )
        debit = AccountCodes.ACCOUNTS_RECEIVABLE if on_account else AccountCodes.CASH
        return AccountMapping(debit, revenue_account)

    expense_account = (
        CATEGORY_TO_EXPENSE_ACCOUNT.get(specific)
        or CATEGORY_TO_EXPENSE_ACCOUNT.get(category)
        or AccountCodes.OTHER_EXPENSES
    )
    credit = AccountCodes.ACCOUNTS_PAYABLE if on_account else AccountCodes.CASH
    return AccountMapping(expense_account, credit)


def get_mapping_for_payment(payment_type: PaymentType) -> AccountMapping:
    """
    Receipt: a client pays us      DR Cash, CR Accounts Receivable
    Disbursement: we pay supplier  DR Accounts Payable, CR Cash
    """
    if payment_type == PaymentType.RECEIPT:
        return AccountMapping(
            AccountCodes.CASH, AccountCodes.ACCOUNTS_RECEIVABLE
        )
    return AccountMapping(AccountCodes.ACCOUNTS_PAYABLE, AccountCodes.CASH)


def get_mapping_for_settlement_discount(
    payment_type: PaymentType,
) -> AccountMapping:
    """Settlement discounts reduce AR (sales discount) or AP (purchase discount)."""
    if payment_type == PaymentType.RECEIPT:
        return AccountMapping(
            AccountCodes.SALES_DISCOUNT, AccountCodes.ACCOUNTS_RECEIVABLE
        )
    return AccountMapping(
        AccountCodes.ACCOUNTS_PAYABLE, AccountCodes.PURCHASE_DISCOUNT
    )


def get_mapping_for_bad_debt() -> AccountMapping:
    """Uncollectible receivable: DR Bad Debt Expense, CR Accounts Receivable."""
    return AccountMapping(
        AccountCodes.BAD_DEBT_EXPENSE, AccountCodes.ACCOUNTS_RECEIVABLE
    )

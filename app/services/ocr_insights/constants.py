"""Constants for OCR field extraction and document grouping."""

from app.schemas.ocr_insights import DocumentGroup

# document_type -> display group
DOCUMENT_CATEGORIES = {
    DocumentGroup.BALANCE_SHEET_DATA: ("balance_sheet", "financial_statements"),
    DocumentGroup.INCOME_STATEMENT: ("income_statement", "profit_loss_statement"),
    DocumentGroup.CASH_FLOW_STATEMENTS: ("cash_flow_statement", "cash_flow"),
    DocumentGroup.TAXES: ("tax_returns", "tax_documents"),
    DocumentGroup.CONTRACTS: ("contracts", "legal_documents"),
    DocumentGroup.INVOICES: ("invoices", "receipts", "bills"),
}

# Labels searched for in raw OCR text, in priority order
REQUIRED_FIELDS = (
    "SIN", "SSN", "Social Insurance Number",
    "Net Income", "Annual Revenue", "Monthly Revenue",
    "Business Name", "Company Name",
    "EIN", "Business Number",
    "Account Number", "Bank Account",
    "Assets", "Total Assets",
    "Liabilities", "Total Liabilities",
    "Cash Flow", "Monthly Cash Flow",
    "Expenses", "Operating Expenses",
    "Revenue", "Gross Revenue",
    "Profit", "Net Profit",
    "Date of Birth", "DOB",
    "Address", "Business Address",
    "Phone", "Phone Number",
    "Email", "Email Address",
)

# Labels whose value is an amount
AMOUNT_FIELDS = frozenset({
    "Net Income", "Annual Revenue", "Monthly Revenue",
    "Assets", "Total Assets", "Liabilities", "Total Liabilities",
    "Cash Flow", "Monthly Cash Flow", "Expenses", "Operating Expenses",
    "Revenue", "Gross Revenue", "Profit", "Net Profit",
})

# Labels whose value is a digit string with optional separators
IDENTIFIER_FIELDS = frozenset({
    "SIN", "SSN", "Social Insurance Number", "EIN", "Business Number",
    "Account Number", "Bank Account", "Phone", "Phone Number",
})

BASE_CONFIDENCE = 0.70

"""Constants for field reconciliation and conflict scoring."""

import re

# Amount-like strings: optional ISO code or symbol, sign, thousands separators, decimals.
# "$125,000.00", "-1,200", "CAD 118000", "118000 CAD"
AMOUNT_PATTERN = re.compile(
    r"^(?:[A-Z]{3}\s*)?"
    r"(?P<sign>[-+])?\s*"
    r"[$€£¥₹]?\s*"
    r"(?P<number>\d{1,3}(?:,\d{3})+|\d+)(?P<fraction>\.\d+)?"
    r"(?:\s*[A-Z]{3})?$"
)

WHITESPACE_PATTERN = re.compile(r"\s+")

# Fields whose disagreement blocks an application outright
CRITICAL_FIELDS = frozenset({
    "business name",
    "legal business name",
    "gst number",
    "sin",
    "social insurance number",
    "req_legal_business_name",
    "req_gst_number",
})

HIGH_PRIORITY_FIELDS = frozenset({
    "business address",
    "revenue last year",
    "account number",
    "bank account",
    "req_business_address",
    "req_revenue_last_year",
    "bank_account_number",
})

FIELD_RECOMMENDATIONS = {
    "business name": "Verify legal business name with incorporation documents",
    "legal business name": "Verify legal business name with incorporation documents",
    "business address": "Confirm current business address with recent utility bill or lease agreement",
    "gst number": "Validate GST number with Canada Revenue Agency records",
    "revenue last year": "Cross-reference with tax returns and financial statements",
    "monthly revenue": "Reconcile revenue figures with financial statements",
    "sin": "Confirm the applicant's SIN against government-issued identification",
    "account number": "Confirm the operating account with a void cheque or bank letter",
}

# Overall risk thresholds
HIGH_RISK_MIN_HIGH_CONFLICTS = 2
MEDIUM_RISK_MIN_CONFLICTS = 3

# Bank-statement header key -> column
BANKING_HEADER_COLUMNS = {
    "account_holder": "req_legal_business_name",
    "business_name": "req_legal_business_name",
    "address": "req_business_address",
    "account_number": "bank_account_number",
    "transit_number": "bank_transit_number",
    "institution_number": "bank_institution_number",
}
BANKING_COLUMN_PREFIX = "bank_"

SOURCE_LABELS = {
    "banking": "Bank Statement",
    "client": "Client Application",
}

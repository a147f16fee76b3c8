"""Fixed sample input for exercising the conflict view without live data."""

from typing import List

from app.schemas.reconciliation import SourcedValue, SourceType

DEMO_RECORDS: List[SourcedValue] = [
    SourcedValue(
        column="req_business_address",
        value="1234 Jasper Ave, Suite 900",
        source_type=SourceType.BANKING,
        source_id="demo-bank-statement-1",
        label="Bank Statement",
    ),
    SourcedValue(
        column="req_business_address",
        value="1234 Jasper Avenue, Ste 900",
        source_type=SourceType.CLIENT,
        source_id="demo-application",
        label="Client Application",
    ),
    SourcedValue(
        column="income_statement_net_income",
        value=125000,
        source_type=SourceType.OCR,
        source_id="demo-income-statement",
        label="Income Statement",
        confidence=0.92,
    ),
    SourcedValue(
        column="income_statement_net_income",
        value=118000,
        source_type=SourceType.OCR,
        source_id="demo-financial-statements",
        label="Financial Statements",
        confidence=0.88,
    ),
    SourcedValue(
        column="req_legal_business_name",
        value="Northern Lights Logistics Ltd.",
        source_type=SourceType.CLIENT,
        source_id="demo-application",
        label="Client Application",
    ),
    SourcedValue(
        column="req_legal_business_name",
        value="NORTHERN LIGHTS LOGISTICS LTD.",
        source_type=SourceType.BANKING,
        source_id="demo-bank-statement-1",
        label="Bank Statement",
    ),
]

"""Fixed constants for the loan comparison engine."""

DISCLAIMER = (
    "Estimates only. Payments assume a fully amortizing loan with a flat 0.5% annual "
    "mortgage insurance factor where MI applies. Actual rates, MI premiums, escrow "
    "amounts and qualification are determined by the lender at application."
)

# Mortgage insurance: a single annual factor, applied below 20% down on a purchase
# or above 80% LTV on a refinance.
MI_ANNUAL_PCT = 0.5
MI_MIN_DOWN_PAYMENT_PCT = 20.0
MI_MAX_LTV_PCT = 80.0

DEFAULT_DOWN_PAYMENT_PCT = 20.0
DEFAULT_TERM_YEARS = 30
LOAN_TERMS = (15, 20, 25, 30)

PROGRAM_DEFAULTS = {
    "type": "conventional",
    "rate": 7.0,
    "term": DEFAULT_TERM_YEARS,
    "selected": True,
    "buyDown": False,
    "buyDownCost": 0.0,
    "effectiveRate": 7.0,
}

PROGRAM_TYPE_NAMES = {
    "conventional": "Conventional Fixed",
    "3arm": "3/1 ARM",
    "5arm": "5/1 ARM",
    "7arm": "7/1 ARM",
    "fha": "FHA",
    "va": "VA",
    "usda": "USDA",
}

# Fixed period in years and the initial/periodic/lifetime adjustment caps.
ARM_TABLE = {"3arm": 3, "5arm": 5, "7arm": 7}
ARM_CAPS = "2-2-5"
ARM_LIFETIME_CAP_PCT = 5.0

# Housing (FE) / total (BE) DTI targets by program type.
PROGRAM_PRESETS = {
    "conventional": {"FE": 31.0, "BE": 45.0},
    "3arm": {"FE": 31.0, "BE": 45.0},
    "5arm": {"FE": 31.0, "BE": 45.0},
    "7arm": {"FE": 31.0, "BE": 45.0},
    "fha": {"FE": 31.0, "BE": 50.0},
    "va": {"FE": 35.0, "BE": 50.0},
    "usda": {"FE": 29.0, "BE": 41.0},
}

LONG_BREAK_EVEN_MONTHS = 60

SCENARIO_PAYLOAD_VERSION = 1

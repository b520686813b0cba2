# mcstore/utils/money.py


def format_naira(amount) -> str:
    value = float(amount or 0)
    if value.is_integer():
        return f"₦{int(value):,}"
    return f"₦{value:,.2f}"


def to_kobo(amount) -> int:
    # paystack liczy w kobo (1/100 naira)
    return int(round(float(amount) * 100))


def from_kobo(amount) -> float:
    return float(amount or 0) / 100

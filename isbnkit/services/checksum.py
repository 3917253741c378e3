"""Check character algorithms for ISBN-10 and EAN/GTIN codes."""


def isbn10_checksum(digits: str) -> str:
    """
    ISBN-10 check character (weighted mod 11).

    Weights run 10 down to 2 over the nine digits of
    group + registrant + publication. A result of 10 renders as 'X'.
    """
    total = sum((10 - i) * int(digit) for i, digit in enumerate(digits[:9]))
    check_digit = (11 - (total % 11)) % 11
    return 'X' if check_digit == 10 else str(check_digit)


def gtin_checksum(digits: str) -> str:
    """
    EAN-13 / GTIN-14 check digit (weighted mod 10).

    Weights alternate 3, 1, 3, ... starting from the rightmost digit, so
    the same function serves 12-digit EAN and 13-digit GTIN-14 payloads.
    """
    total = sum(int(digit) * (3 if i % 2 == 0 else 1)
                for i, digit in enumerate(reversed(digits)))
    return str((10 - (total % 10)) % 10)

import pytest

from isbnkit.services.checksum import gtin_checksum, isbn10_checksum


@pytest.mark.parametrize("digits, expected", [
    ('030640615', '2'),
    ('207036002', '4'),
    ('225300930', 'X'),
    ('999012345', '4'),
    ('000000000', '0'),
])
def test_isbn10_checksum(digits, expected):
    assert isbn10_checksum(digits) == expected


@pytest.mark.parametrize("digits, expected", [
    ('978030640615', '7'),
    ('978207036002', '4'),
    ('978225300930', '6'),
    ('979109063607', '1'),
    ('1978030640615', '4'),   # GTIN-14 payload
    ('0978030640615', '7'),
    ('000000000000', '0'),
])
def test_gtin_checksum(digits, expected):
    assert gtin_checksum(digits) == expected


def test_gtin_checksum_is_single_digit():
    for payload in ('978000000001', '978999999999', '979123456789'):
        result = gtin_checksum(payload)
        assert len(result) == 1 and result.isdigit()

import pytest

from forge_escrow.services.fees import FeeSplit, fee_split, gross_release


def test_fee_split_even_total_fee():
    split = fee_split(500)

    assert split.legs() == (450, 25, 25)
    assert split.total_fee == 50
    assert split.dust == 0


def test_fee_split_odd_total_fee_leaves_one_unit_of_dust():
    split = fee_split(333)

    assert split.total_fee == 33
    assert split.fee_a == 16
    assert split.fee_b == 16
    assert split.net == 300
    assert split.dust == 1


@pytest.mark.parametrize("gross", [0, 1, 9, 10, 19, 20, 99, 101, 12345, 2**63 - 1])
def test_fee_split_never_overspends(gross):
    split = fee_split(gross)

    assert split.net + split.fee_a + split.fee_b + split.dust == gross
    assert 0 <= split.dust <= 1
    assert split.fee_a == split.fee_b


def test_fee_split_below_ten_units_charges_nothing():
    assert fee_split(9) == FeeSplit(gross=9, net=9, fee_a=0, fee_b=0)


def test_fee_split_rejects_negative_gross():
    with pytest.raises(ValueError):
        fee_split(-1)


@pytest.mark.parametrize(
    ("remaining", "percentage", "expected"),
    [(1000, 50, 500), (500, 100, 500), (1000, 33, 330), (1, 1, 0), (7, 50, 3)],
)
def test_gross_release_floors(remaining, percentage, expected):
    assert gross_release(remaining, percentage) == expected

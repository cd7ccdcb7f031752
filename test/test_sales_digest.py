from datetime import date
import time

import pytest

from salesdash.domain.models import Product, Sale, User
from salesdash.domain.normalize import sales_from_api, products_from_api
from salesdash.services.analytics import (
    SaleFilters,
    derive_sales_digest,
    filter_sales,
    filter_products,
    product_name,
    sale_day,
    sales_total,
    today_sales_count,
    top_selling_product,
    user_name,
)

PEN = Product(id=1, name="Pen", description="Blue ink pen")
CUP = Product(id=2, name="Cup", description="Ceramic cup")
ANA = User(id=1, name="Ana", email="ana@example.com")
LUIS = User(id=2, name="Luis", email="luis@example.com")


def _sale(sale_id, product_id, qty, price, day="2024-01-01", user_id=1):
    return Sale(id=sale_id, product_id=product_id, user_id=user_id, quantity=qty, unit_price=price, date=day)


def test_search_pen_scenario_returns_sale_with_coerced_line_total():
    products = products_from_api([{"id": 1, "name": "Pen"}, {"id": 2, "name": "Cup"}])
    sales = sales_from_api([
        {"id": 1, "productId": 1, "userId": 1, "quantity": "3", "unitPrice": "2.50", "date": "2024-01-01"},
    ])

    digest = derive_sales_digest(sales, products, [], SaleFilters(search_term="pen"))

    assert [s.id for s in digest.filtered_sales] == [1]
    assert digest.filtered_sales[0].line_total == 7.50
    assert digest.sales_total == 7.50


def test_empty_search_without_filters_keeps_every_sale_in_order():
    sales = [_sale(3, 2, 1, 1.0), _sale(1, 1, 2, 2.0), _sale(2, 1, 1, 5.0)]

    assert filter_sales(sales, [PEN, CUP], [ANA], SaleFilters()) == sales


def test_filters_are_conjunctive_and_return_a_subsequence():
    sales = [
        _sale(1, 1, 1, 1.0, "2024-01-01", user_id=1),
        _sale(2, 2, 1, 1.0, "2024-01-01", user_id=2),
        _sale(3, 1, 1, 1.0, "2024-01-02", user_id=2),
        _sale(4, 1, 1, 1.0, "2024-01-01", user_id=2),
    ]
    out = filter_sales(sales, [PEN, CUP], [ANA, LUIS], SaleFilters(search_term="LUIS", product_id=1, date="2024-01-01"))

    assert [s.id for s in out] == [4]
    assert all(s in sales for s in out)


def test_search_matches_user_name_and_sale_id():
    sales = [_sale(15, 2, 1, 1.0, user_id=2), _sale(7, 1, 1, 1.0, user_id=1)]

    assert [s.id for s in filter_sales(sales, [PEN, CUP], [ANA, LUIS], SaleFilters(search_term="ana"))] == [7]
    assert [s.id for s in filter_sales(sales, [PEN, CUP], [ANA, LUIS], SaleFilters(search_term="15"))] == [15]


def test_search_falls_back_to_embedded_product_name():
    sale = Sale(id=9, product_id=42, user_id=1, quantity=1, unit_price=1, date="2024-01-01",
                product=Product(id=42, name="Stapler", description=""))

    assert filter_sales([sale], [], [], SaleFilters(search_term="stap")) == [sale]


def test_unknown_names_do_not_fail_on_empty_lists():
    assert product_name(1, []) == "Desconocido"
    assert user_name(1, []) == "Desconocido"


def test_date_filter_compares_calendar_day_of_datetimes():
    sales = [_sale(1, 1, 1, 1.0, "2024-03-05T18:30:00"), _sale(2, 1, 1, 1.0, "2024-03-06")]

    out = filter_sales(sales, [PEN], [], SaleFilters(date="2024-03-05"))

    assert [s.id for s in out] == [1]


def test_sale_day_handles_malformed_and_empty_dates():
    assert sale_day("") == ""
    assert sale_day("not a date") == ""
    assert sale_day("2024-02-29") == "2024-02-29"


def test_sales_total_of_empty_result_is_zero():
    total = sales_total([])

    assert total == 0
    assert total == total  # not NaN


def test_malformed_numeric_strings_count_as_zero():
    sales = sales_from_api([
        {"id": 1, "productId": 1, "userId": 1, "quantity": "abc", "unitPrice": "2.50", "date": "2024-01-01"},
        {"id": 2, "productId": 1, "userId": 1, "quantity": "2", "unitPrice": None, "date": "2024-01-01"},
        {"id": 3, "productId": 1, "userId": 1, "quantity": "2", "unitPrice": "1.25", "date": "2024-01-01"},
    ])

    assert sales_total(sales) == 2.5


def test_top_selling_product_picks_highest_quantity():
    sales = [_sale(1, 1, 2, 1.0), _sale(2, 2, 5, 1.0)]

    assert top_selling_product(sales, [PEN, CUP]) == "Cup"


def test_top_selling_product_tie_goes_to_first_in_list_order():
    sales = [_sale(1, 2, 3, 1.0), _sale(2, 1, 3, 1.0)]

    assert top_selling_product(sales, [PEN, CUP]) == "Pen"


def test_top_selling_product_without_products_is_na():
    assert top_selling_product([_sale(1, 1, 3, 1.0)], []) == "N/A"


def test_digest_counts_today_over_unfiltered_sales():
    today = date(2024, 5, 10)
    sales = [
        _sale(1, 1, 1, 1.0, "2024-05-10"),
        _sale(2, 2, 1, 1.0, "2024-05-10T09:00:00"),
        _sale(3, 2, 1, 1.0, "2024-05-09"),
    ]

    digest = derive_sales_digest(sales, [PEN, CUP], [], SaleFilters(product_id=1), today=today)

    assert [s.id for s in digest.filtered_sales] == [1]
    assert digest.today_sales_count == 2
    assert today_sales_count([], today) == 0


def test_digest_over_empty_sales_uses_defaults():
    digest = derive_sales_digest([], [], [], SaleFilters(search_term="x"))

    assert digest.filtered_sales == []
    assert digest.sales_total == 0.0
    assert digest.today_sales_count == 0
    assert digest.top_selling_product == "N/A"


def test_filter_products_matches_name_or_description():
    assert filter_products([PEN, CUP], "ceramic") == [CUP]
    assert filter_products([PEN, CUP], "") == [PEN, CUP]


@pytest.fixture
def local_tz(monkeypatch):
    """Pin the process timezone to a POSIX TZ string (no tz database needed)."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def pin(tz):
        monkeypatch.setenv("TZ", tz)
        time.tzset()

    yield pin
    monkeypatch.undo()
    time.tzset()


def test_sale_day_converts_utc_datetimes_to_the_local_day(local_tz):
    local_tz("EST+05EDT,M3.2.0,M11.1.0")

    assert sale_day("2024-03-06T02:30:00Z") == "2024-03-05"
    assert sale_day("2024-03-06T00:30:00+01:00") == "2024-03-05"
    assert sale_day("2024-03-06T12:00:00Z") == "2024-03-06"
    assert sale_day("2024-03-06T02:30:00") == "2024-03-06"


def test_sale_day_east_of_utc_rolls_forward(local_tz):
    local_tz("JST-09")

    assert sale_day("2024-03-05T20:00:00Z") == "2024-03-06"
    assert sale_day("2024-03-05") == "2024-03-05"


def test_today_count_uses_local_day_near_midnight(local_tz):
    local_tz("EST+05EDT,M3.2.0,M11.1.0")
    sales = [
        _sale(1, 1, 1, 1.0, "2024-03-06T03:00:00Z"),
        _sale(2, 1, 1, 1.0, "2024-03-05T04:30:00Z"),
        _sale(3, 1, 1, 1.0, "2024-03-05"),
        _sale(4, 1, 1, 1.0, "2024-03-05T23:59:00-05:00"),
    ]

    assert today_sales_count(sales, date(2024, 3, 5)) == 3
    assert today_sales_count(sales, date(2024, 3, 4)) == 1


def test_search_term_is_matched_as_given():
    sales = [_sale(1, 1, 1, 1.0), _sale(2, 2, 1, 1.0)]

    assert filter_sales(sales, [PEN, CUP], [], SaleFilters(search_term="pen ")) == []
    assert [s.id for s in filter_sales(sales, [PEN, CUP], [], SaleFilters(search_term="PEN"))] == [1]
    assert filter_sales(sales, [PEN, CUP], [], SaleFilters(search_term="")) == sales
    assert filter_products([PEN, CUP], "cup ") == []

import pytest

from app.core.constants import ListingStatusEnum
from app.services.listing import ListingView, filter_schools, page_count, paginate
from tests.helpers.factories import make_school, school_payload


@pytest.fixture
def alpha_beta():
    return [
        make_school(1, name="Alpha", city="Pune", state="Maharashtra", email_id="alpha@school.in", contact=9876543210),
        make_school(2, name="Beta", city="Mumbai", state="Maharashtra", email_id="beta@school.in", contact=9123456780),
    ]


def test_filter_matches_city_case_insensitively(alpha_beta):
    result = filter_schools(alpha_beta, "pune")
    assert [s.name for s in result] == ["Alpha"]


def test_empty_query_keeps_everything_in_order(alpha_beta):
    result = filter_schools(alpha_beta, "")

    assert [s.name for s in result] == ["Alpha", "Beta"]
    assert result is not alpha_beta


def test_unmatched_query_returns_nothing(alpha_beta):
    assert filter_schools(alpha_beta, "kolkata") == []


@pytest.mark.parametrize("query, expected", [
    ("BETA", ["Beta"]),
    ("maha", ["Alpha", "Beta"]),
    ("ALPHA@", ["Alpha"]),
    ("912345", ["Beta"]),
    ("3210", ["Alpha"]),
])
def test_filter_searches_all_five_fields(alpha_beta, query, expected):
    assert [s.name for s in filter_schools(alpha_beta, query)] == expected


def test_filter_ignores_address(alpha_beta):
    assert filter_schools(alpha_beta, "Long Street") == []


def test_filter_does_not_mutate_source(alpha_beta):
    before = list(alpha_beta)
    filter_schools(alpha_beta, "pune")
    assert alpha_beta == before


def test_third_page_of_twenty_five_holds_last_five():
    records = [make_school(i) for i in range(25)]

    page = paginate(records, 3, 10)

    assert [s.id for s in page] == [20, 21, 22, 23, 24]
    assert page_count(len(records), 10) == 3


def test_empty_set_has_one_empty_page():
    assert paginate([], 1, 10) == []
    assert page_count(0, 10) == 1


def test_page_past_the_end_is_empty():
    records = [make_school(i) for i in range(5)]
    assert paginate(records, 4, 10) == []


@pytest.mark.asyncio
async def test_activate_loads_schools(school_api, backend):
    backend.schools = [school_payload(i) for i in range(3)]
    view = ListingView(school_api)

    assert view.status == ListingStatusEnum.LOADING
    assert view.visible == []

    status = await view.activate()

    assert status == ListingStatusEnum.LOADED
    assert [s.id for s in view.visible] == [0, 1, 2]
    assert len(backend.requests) == 1


@pytest.mark.asyncio
async def test_activate_fetches_only_once(school_api, backend):
    view = ListingView(school_api)
    await view.activate()
    await view.activate()

    assert len(backend.requests) == 1


@pytest.mark.asyncio
async def test_failed_fetch_exposes_reason(school_api, backend):
    backend.list_status = 500
    view = ListingView(school_api)

    status = await view.activate()

    assert status == ListingStatusEnum.FAILED
    assert view.error == "Failed to fetch schools"
    assert view.records == []
    with pytest.raises(RuntimeError):
        view.to_page()


@pytest.mark.asyncio
async def test_network_failure_exposes_reason(school_api, backend):
    backend.network_down = True
    view = ListingView(school_api)

    await view.activate()

    assert view.status == ListingStatusEnum.FAILED
    assert view.error.startswith("Network error")


def test_late_results_after_deactivate_are_ignored(school_api):
    view = ListingView(school_api)
    view.deactivate()

    view.fetch_succeeded([make_school(1)])
    view.fetch_failed("too late")

    assert view.status == ListingStatusEnum.LOADING
    assert view.records == []
    assert view.error is None


def _loaded_view(school_api, count, page_size=10):
    view = ListingView(school_api, page_size=page_size)
    view.fetch_succeeded([make_school(i, city="Pune" if i % 5 == 0 else "Nagpur") for i in range(count)])
    return view


def test_next_and_previous_clamp_at_the_edges(school_api):
    view = _loaded_view(school_api, 25)

    view.previous_page()
    assert view.page == 1

    view.next_page()
    view.next_page()
    assert view.page == 3
    view.next_page()
    assert view.page == 3
    assert [s.id for s in view.visible] == [20, 21, 22, 23, 24]


def test_navigation_on_empty_result_stays_on_page_one(school_api):
    view = _loaded_view(school_api, 0)

    view.next_page()
    assert view.page == 1
    assert view.total_pages == 1
    assert view.visible == []


def test_new_query_resets_to_first_page(school_api):
    view = _loaded_view(school_api, 25)
    view.go_to(3)

    view.set_query("pune")

    assert view.page == 1
    assert [s.id for s in view.visible] == [0, 5, 10, 15, 20]


def test_larger_page_size_clamps_current_page(school_api):
    view = _loaded_view(school_api, 25)
    view.go_to(3)

    view.set_page_size(30)

    assert view.page == 1
    assert len(view.visible) == 25


def test_shrinking_record_set_clamps_current_page(school_api):
    view = _loaded_view(school_api, 25)
    view.go_to(3)

    view.fetch_succeeded([make_school(i) for i in range(12)])

    assert view.page == 2
    assert [s.id for s in view.visible] == [10, 11]


def test_go_to_clamps_out_of_range_pages(school_api):
    view = _loaded_view(school_api, 25)

    view.go_to(99)
    assert view.page == 3
    view.go_to(-4)
    assert view.page == 1


def test_unsupported_page_size_is_rejected(school_api):
    view = ListingView(school_api)
    with pytest.raises(ValueError):
        view.set_page_size(15)


def test_page_summary(school_api):
    view = _loaded_view(school_api, 25, page_size=20)
    view.next_page()

    page = view.to_page()

    assert page.page == 2
    assert page.pages == 2
    assert page.total == 25
    assert page.size == 20
    assert len(page.items) == 5
    assert page.has_previous and not page.has_next
    assert page.empty_message is None


def test_page_summary_for_no_matches(school_api):
    view = _loaded_view(school_api, 4)
    view.set_query("zzz")

    page = view.to_page()

    assert page.items == []
    assert page.pages == 1
    assert page.empty_message == "No schools found matching your search."

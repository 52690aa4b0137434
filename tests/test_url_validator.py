from unittest.mock import Mock

import requests

from sitemap_checker.status_store import StatusRecord, StatusStore
from sitemap_checker.url_validator import URLValidator, create_session


def make_validator(session, **kwargs):
    store = StatusStore()
    return URLValidator(store, session=session, **kwargs), store


def test_validate_200_goes_to_all_records_only(fake_response):
    session = Mock()
    session.get.return_value = fake_response(200)
    validator, store = make_validator(session)

    record = validator.validate("https://a.test/")

    assert record == StatusRecord("https://a.test/", 200)
    assert store.all_records == [record]
    assert store.non_200_records == []
    session.get.assert_called_once_with("https://a.test/", timeout=None)


def test_validate_non_200_goes_to_both_lists(fake_response):
    session = Mock()
    session.get.return_value = fake_response(404)
    validator, store = make_validator(session)

    record = validator.validate("https://b.test/")

    assert record.status == 404
    assert store.all_records == [record]
    assert store.non_200_records == [record]


def test_validate_201_counts_as_non_200(fake_response):
    session = Mock()
    session.get.return_value = fake_response(201)
    validator, store = make_validator(session)

    validator.validate("https://c.test/")

    assert store.non_200_records == [StatusRecord("https://c.test/", 201)]


def test_connection_error_is_500_and_only_non_200():
    session = Mock()
    session.get.side_effect = requests.exceptions.ConnectionError("refused")
    validator, store = make_validator(session)

    record = validator.validate("https://down.test/")

    assert record == StatusRecord("https://down.test/", 500)
    assert store.non_200_records == [record]
    assert store.all_records == []


def test_error_with_response_uses_its_status():
    session = Mock()
    session.get.side_effect = requests.exceptions.HTTPError("bad gateway", response=Mock(status_code=502))
    validator, store = make_validator(session)

    record = validator.validate("https://proxy.test/")

    assert record.status == 502
    assert store.non_200_records == [record]


def test_timeout_is_passed_and_mapped():
    session = Mock()
    session.get.side_effect = requests.exceptions.Timeout("slow")
    validator, store = make_validator(session, timeout=2.5)

    record = validator.validate("https://slow.test/")

    assert record.status == 500
    session.get.assert_called_once_with("https://slow.test/", timeout=2.5)


def test_record_failures_in_all_gives_parity():
    session = Mock()
    session.get.side_effect = requests.exceptions.ConnectionError("refused")
    validator, store = make_validator(session, record_failures_in_all=True)

    record = validator.validate("https://down.test/")

    assert store.all_records == [record]
    assert store.non_200_records == [record]


def test_unexpected_errors_propagate():
    session = Mock()
    session.get.side_effect = RuntimeError("bug")
    validator, _ = make_validator(session)

    try:
        validator.validate("https://a.test/")
        assert False, "expected RuntimeError to bubble up"
    except RuntimeError as e:
        assert "bug" in str(e)


def test_create_session_sets_user_agent_and_no_retries():
    session = create_session(user_agent="TestAgent/1.0", pool_size=3)

    assert session.headers["User-Agent"] == "TestAgent/1.0"
    assert session.get_adapter("https://a.test/").max_retries.total == 0

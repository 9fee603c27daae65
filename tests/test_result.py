"""Unit tests for the repository Result type."""

from repositories.result import FAILED_ID, Result, Status


def test_ok_is_truthy_even_for_falsy_values():
    result = Result.ok(0)

    assert result
    assert result.status is Status.OK
    assert result.unwrap_or(FAILED_ID) == 0


def test_not_found_and_failed_are_distinguishable():
    missing = Result.not_found()
    broken = Result.failed(ConnectionError("refused"))

    assert not missing and not broken
    assert missing.is_not_found and not missing.is_failed
    assert broken.is_failed and not broken.is_not_found
    assert isinstance(broken.error, ConnectionError)
    assert missing.unwrap_or(None) is None
    assert broken.unwrap_or([]) == []

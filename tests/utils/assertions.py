"""Custom assertion helpers."""

from typing import Any, Optional


def assert_silent_redirect(result: Any, to: str = "/dashboard") -> None:
    """Assert a view result redirects without showing a notice."""
    assert not result.ok
    assert result.redirect_to == to
    assert result.notice is None


def assert_error_notice(result: Any, contains: Optional[str] = None) -> None:
    """Assert a failed view result carries an auto-dismissing error notice."""
    assert not result.ok
    assert result.notice is not None
    assert result.notice.severity == "error"
    assert result.notice.message.startswith("❌")
    assert result.notice.dismiss_after_seconds > 0
    if contains:
        assert contains in result.notice.message


def assert_valid_page(page: Any) -> None:
    """Assert page bookkeeping is consistent."""
    assert 1 <= page.current_page <= page.total_pages
    assert len(page.items) <= page.page_size
    assert page.total_items >= len(page.items)

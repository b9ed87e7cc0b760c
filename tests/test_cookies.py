"""Tests for the session cookie jar."""
import pytest
from harvester.auth.cookies import CookieJar


def test_absorb_stores_cookie():
    """Test a Set-Cookie header is stored."""
    jar = CookieJar()
    jar.absorb(["session=abc123"])
    assert "session=abc123" in jar.render_header()


def test_absorb_ignores_attributes():
    """Test cookie attributes after the first segment are dropped."""
    jar = CookieJar()
    jar.absorb(["session=abc123; Path=/; Domain=example.com; HttpOnly; Expires=Wed, 21 Oct 2026 07:28:00 GMT"])
    assert jar.to_dict() == {"session": "abc123"}


def test_absorb_deleted_keeps_previous_value():
    """A deletion marker never clears an entry."""
    jar = CookieJar({"session": "abc123"})
    jar.absorb(["session=deleted; expires=Thu, 01 Jan 1970 00:00:01 GMT"])
    assert jar.get("session") == "abc123"


@pytest.mark.parametrize("header", ["session=", "session=DELETED", "session=was-Deleted-here", "session= "])
def test_absorb_deletion_like_values_are_noops(header):
    """Test empty and deleted values leave the jar untouched."""
    jar = CookieJar({"session": "abc123"})
    jar.absorb([header])
    assert jar.to_dict() == {"session": "abc123"}


def test_absorb_skips_malformed():
    """Test segments without a name are skipped."""
    jar = CookieJar()
    jar.absorb(["novalue", "=orphan", "  =x; Path=/"])
    assert len(jar) == 0
    assert jar.render_header() == ""


def test_absorb_overwrites_and_keeps_equals_in_value():
    """Test a later cookie overwrites and values may contain '='."""
    jar = CookieJar({"token": "old"})
    jar.absorb(["token=a=b==; Path=/", "other=1"])
    assert jar.get("token") == "a=b=="
    assert jar.render_header() == "token=a=b==; other=1"


def test_seed_from_header():
    """Test seeding from a Cookie header string."""
    jar = CookieJar()
    jar.seed_from_header("a=1; b = 2 ;c=3;broken; =skipped")
    assert jar.to_dict() == {"a": "1", "b": "2", "c": "3"}


def test_seed_from_empty_header():
    """Test an empty seed leaves the jar empty."""
    jar = CookieJar()
    jar.seed_from_header("")
    assert jar.names() == []


def test_hydrate_ignores_non_mapping():
    """Test hydrating from a non-mapping is ignored."""
    jar = CookieJar({"a": "1"})
    jar.hydrate(None)
    jar.hydrate(["a", "b"])
    assert jar.to_dict() == {"a": "1"}


def test_to_dict_is_a_copy():
    """Test the serialized jar does not alias internal state."""
    jar = CookieJar({"a": "1"})
    exported = jar.to_dict()
    exported["a"] = "changed"
    assert jar.get("a") == "1"
    assert CookieJar(exported).render_header() == "a=changed"

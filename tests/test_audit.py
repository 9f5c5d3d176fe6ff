import pytest

from utils.audit import client_ip, escape_log_field


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("user@example.com", "user@example.com"),
        ("a\nb", "a\\nb"),
        ("a\r\nb", "a\\r\\nb"),
        ("back\\slash", "back\\\\slash"),
        ("tab\there", "tab\\there"),
        ("line\u2028sep", "line\\u2028sep"),
        ("José", "José"),
        (42, "42"),
    ],
)
def test_escape_log_field(raw, expected):
    assert escape_log_field(raw) == expected


def test_client_ip_ignores_forwarded_for(app):
    with app.test_request_context(
        "/auth/login",
        headers={"X-Forwarded-For": "127.0.0.1"},
        environ_base={"REMOTE_ADDR": "203.0.113.9"},
    ):
        assert client_ip() == "203.0.113.9"

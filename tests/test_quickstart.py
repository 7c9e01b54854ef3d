"""Test that the quickstart API works for ninchat-master."""
from __future__ import annotations

KEY_ID = "22nlihvg"
KEY_SECRET = "C58sAn+Dp2Ogb2+FdfSNg3J0ImMYfYodUUgXFF2OPo0="


def test_quickstart_import() -> None:
    import ninchat_master

    assert ninchat_master.__version__ == "0.1.0"


def test_quickstart_create_session() -> None:
    from ninchat_master import MasterKey

    master = MasterKey(KEY_ID, KEY_SECRET)
    token = master.sign_create_session(1700000000)
    assert token.startswith("22nlihvg.1700000000.")


def test_quickstart_join_channel_for_user() -> None:
    from ninchat_master import MasterKey

    master = MasterKey(KEY_ID, KEY_SECRET)
    token = master.sign_join_channel_for_user(
        1700000000, "1bfbr0u", "22ouqqbp", [("silenced", False)]
    )
    assert token.endswith(".1")


def test_quickstart_secure_metadata() -> None:
    from ninchat_master import MasterKey

    master = MasterKey(KEY_ID, KEY_SECRET)
    token = master.secure_metadata(1700000000, {"foo": 3.14159, "bar": "asdf"})
    assert token.startswith("22nlihvg.")
    assert len(token.split(".")) == 2


def test_quickstart_invalid_key() -> None:
    import pytest

    from ninchat_master import InvalidKey, MasterKey

    with pytest.raises(InvalidKey):
        MasterKey(KEY_ID, "")


def test_quickstart_repr() -> None:
    from ninchat_master import MasterKey

    assert repr(MasterKey(KEY_ID, KEY_SECRET)) == "MasterKey(key_id='22nlihvg', token_format='dotted')"

#!/usr/bin/env python3
"""Example: Quickstart

Prints every kind of master signature and secure metadata token for a
sample master key, together with its size.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install ninchat-master
"""
from __future__ import annotations

import time

import ninchat_master
from ninchat_master import MasterKey

MASTER_KEY_ID = "22nlihvg"
MASTER_KEY_SECRET = "C58sAn+Dp2Ogb2+FdfSNg3J0ImMYfYodUUgXFF2OPo0="

USER_ID = "22ouqqbp"
CHANNEL_ID = "1bfbr0u"
MEMBER_ATTRS = [("silenced", False)]
METADATA = {
    "foo": 3.14159,
    "bar": "asdf",
    "baz": [1, 2, 3],
    "quux": {"a": 100, "b": 200},
}


def dump(token: str) -> None:
    print()
    print(f"Size: {len(token)}")
    print(f"Data: {token}")


def main() -> None:
    print(f"ninchat-master version: {ninchat_master.__version__}")

    master = MasterKey(MASTER_KEY_ID, MASTER_KEY_SECRET)
    expire = time.time() + 60

    dump(master.sign_create_session(expire))
    dump(master.sign_create_session_for_user(expire, USER_ID))
    dump(master.sign_join_channel(expire, CHANNEL_ID))
    dump(master.sign_join_channel(expire, CHANNEL_ID, MEMBER_ATTRS))
    dump(master.sign_join_channel_for_user(expire, CHANNEL_ID, USER_ID))
    dump(master.sign_join_channel_for_user(expire, CHANNEL_ID, USER_ID, MEMBER_ATTRS))

    dump(master.secure_metadata(expire, METADATA))
    dump(master.secure_metadata_for_user(expire, METADATA, USER_ID))


if __name__ == "__main__":
    main()

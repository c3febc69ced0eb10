from __future__ import annotations

# sample with 4 users, one per scheme (password for userN is passN)
SAMPLE_01 = (
    "user2:2CHkkwa2AtqGs\n"
    "user3:{SHA}3ipNV1GrBtxPmHFC21fCbVCSXIo=\n"
    "user4:pass4\n"
    "user1:$apr1$t4tc7jTh$GPIWVUo8sQKJlUdV8V5vu0\n"
)

SAMPLE_USERS = {
    "user1": "md5",
    "user2": "crypt",
    "user3": "sha1",
    "user4": "plain",
}

# blank, comment & malformed lines mixed in with records
SAMPLE_NOISY = (
    "\n"
    "# managed by hand\n"
    "bob:pass1:admin\n"
    "garbage without colon\n"
    " \t \n"
    ":no-username\n"
    "jim:pass2\n"
    "  #commented:out\n"
)


def fixed_salt(length: int, chars: str) -> str:
    """salt generator that always returns the same salt"""
    return ("saltsalt" * 2)[:length]

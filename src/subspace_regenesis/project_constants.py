"""
Fixed parameters of the Subspace regenesis snapshot.

These values define which accounts are carried over to the new genesis.
Changing them changes the snapshot and MUST be reviewed together with the
genesis config that consumes it.
"""

# Root account of the source chain
SUDO_ACCOUNT = "5CXTmJEusve5ixyJufqHThmy4qUrrm6FyLCR7QfE4bbyMTNC"

# Well-known dev accounts (sr25519 //Alice and //Bob)
DEV_ACCOUNTS = (
    "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY",
    "5FHneW46xGXgs5mUiveU4sbTyGBzmstUspZC92UhjJM694ty",
)

# Accounts which receive token grants in the new genesis
TOKEN_GRANTS = (
    "5Dns1SVEeDqnbSm2fVUqHJPCvQFXHVsgiw28uMBwmuaoKFYi",
    "5DxtHHQL9JGapWCQARYUAWj4yDcwuhg9Hsk5AjhEzuzonVyE",
    "5EHhw9xuQNdwieUkNoucq2YcateoMVJQdN8EZtmRy3roQkVK",
    "5C5qYYCQBnanGNPGwgmv6jiR2MxNPrGnWYLPFEyV1Xdy2P3x",
    "5GBWVfJ253YWVPHzWDTos1nzYZpa9TemP7FpQT9RnxaFN6Sz",
    "5F9tEPid88uAuGbjpyegwkrGdkXXtaQ9sGSWEnYrfVCUCsen",
    "5DkJFCv3cTBsH5y1eFT94DXMxQ3EmVzYojEA88o56mmTKnMp",
    "5G23o1yxWgVNQJuL4Y9UaCftAFvLuMPCRe7BCARxCohjoHc9",
    "5GhHwuJoK1b7uUg5oi8qUXxWHdfgzv6P5CQSdJ3ffrnPRgKM",
    "5EqBwtqrCV427xCtTsxnb9X2Qay39pYmKNk9wD9Kd62jLS97",
    "5D9pNnGCiZ9UqhBQn5n71WFVaRLvZ7znsMvcZ7PHno4zsiYa",
    "5DXfPcXUcP4BG8LBSkJDrfFNApxjWySR6ARfgh3v27hdYr5S",
    "5CXSdDJgzRTj54f9raHN2Z5BNPSMa2ETjqCTUmpaw3ECmwm4",
    "5DqKxL7bQregQmUfFgzTMfRKY4DSvA1KgHuurZWYmxYSCmjY",
    "5CfixiS93yTwHQbzzfn8P2tMxhKXdTx7Jam9htsD7XtiMFtn",
    "5FZe9YzXeEXe7sK5xLR8yCmbU8bPJDTZpNpNbToKvSJBUiEo",
    "5FZwEgsvZz1vpeH7UsskmNmTpbfXvAcojjgVfShgbRqgC1nx",
)

# twox128("System") ++ twox128("Account")
SYSTEM_ACCOUNT_PREFIX = bytes.fromhex(
    "26aa394eea5630e07c48ae0c9558cef7b99d880ec681799c0cf30e8886371da9"
)

# twox128("Balances") ++ twox128("TotalIssuance")
TOTAL_ISSUANCE_KEY = bytes.fromhex(
    "c2261276cc9d1f8598ea4b6a74b15c2f57c875e4cff74148e4628f264b974c80"
)

# System.Account keys: prefix | blake2_128(account) | account
STORAGE_PREFIX_LEN = 32
BLAKE_HASH_LEN = 16
ACCOUNT_ID_LEN = 32
ACCOUNT_KEY_LEN = STORAGE_PREFIX_LEN + BLAKE_HASH_LEN + ACCOUNT_ID_LEN

# AccountInfo: 4 x u32 counters, then AccountData with 4 x u128
ACCOUNT_INFO_LEN = 4 * 4 + 4 * 16
BALANCE_LEN = 16

# Generic Substrate address format
DEFAULT_SS58_FORMAT = 42

DEFAULT_NODE_URL = "ws://127.0.0.1:9944"
DEFAULT_PAGE_SIZE = 512

SNAPSHOT_FILE_TEMPLATE = "balances_{number}.json"

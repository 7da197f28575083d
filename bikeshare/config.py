import os

client_mode = os.getenv("BIKESHARE_MODE", "development")
"""The operational mode of the client. Development runs against in-memory ledgers."""

rpc_url = os.getenv("BIKESHARE_RPC_URL", "https://rpc.testnet.near.org")
"""The JSON-RPC endpoint used for view calls."""

fleet_contract_id = os.getenv("BIKESHARE_FLEET_CONTRACT", "bike_mashharuki.testnet")
"""The account of the fleet ledger contract."""

token_contract_id = os.getenv("BIKESHARE_TOKEN_CONTRACT", "sub.ft_mashharuki.testnet")
"""The account of the fungible token ledger contract."""

account_id = os.getenv("BIKESHARE_ACCOUNT_ID", "alice.testnet")
"""The account the wallet acts for."""

sync_concurrency = int(os.getenv("BIKESHARE_SYNC_CONCURRENCY", "1"))
"""How many bikes may be read at once when synchronizing the whole fleet."""

sentry_dsn = os.getenv("SENTRY_DSN", None)
"""The sentry DSN, exception tracking is disabled when unset."""

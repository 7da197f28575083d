import pytest
from aiobreaker import CircuitBreaker
from faker import Faker
from faker.providers import internet

from bikeshare.gateway import FleetGateway, TokenGateway
from bikeshare.gateway.memory import MemoryNetwork, MemoryLedgerGateway, FleetContract, FungibleTokenContract
from bikeshare.gateway.rpc import node_breaker
from bikeshare.service import Session, BikeStatusReader, FleetSynchronizer, RentalOrchestrator
from bikeshare.wallet import DummyWallet

fake = Faker()
fake.add_provider(internet)

FLEET_ID = "bike.testnet"
TOKEN_ID = "ft.testnet"
NUM_OF_BIKES = 5
FEE = 30
REWARD = 15
FLEET_FUNDS = 1_000
ACCOUNT_FUNDS = 100


def random_account_id() -> str:
    return f"{fake.user_name().replace('.', '_').lower()}{fake.random_int(0, 9999)}.testnet"


@pytest.fixture
def account_id():
    return random_account_id()


@pytest.fixture
def other_account_id(account_id):
    other = random_account_id()
    while other == account_id:
        other = random_account_id()
    return other


@pytest.fixture
def network():
    network = MemoryNetwork()
    network.deploy(FLEET_ID, FleetContract(NUM_OF_BIKES, TOKEN_ID, amount_to_use_bike=FEE, inspection_reward=REWARD))
    token = network.deploy(TOKEN_ID, FungibleTokenContract(TOKEN_ID, 1_000_000))
    token.register(FLEET_ID, FLEET_FUNDS)
    return network


@pytest.fixture
def fleet_contract(network) -> FleetContract:
    return network.contracts[FLEET_ID]


@pytest.fixture
def token_contract(network) -> FungibleTokenContract:
    return network.contracts[TOKEN_ID]


@pytest.fixture
def registered_account(token_contract, account_id):
    """The account, registered on the token ledger with some tokens."""
    token_contract.register(account_id, ACCOUNT_FUNDS)
    return account_id


@pytest.fixture
def wallet(network, account_id):
    return DummyWallet(network, account_id)


@pytest.fixture
def fleet_gateway(network, wallet):
    return FleetGateway(MemoryLedgerGateway(FLEET_ID, wallet, network))


@pytest.fixture
def token_gateway(network, wallet):
    return TokenGateway(MemoryLedgerGateway(TOKEN_ID, wallet, network))


@pytest.fixture
def breaker() -> CircuitBreaker:
    return node_breaker()


@pytest.fixture
def session(wallet, token_gateway):
    return Session(wallet, token_gateway)


@pytest.fixture
def bike_status_reader(fleet_gateway):
    return BikeStatusReader(fleet_gateway)


@pytest.fixture
def fleet_synchronizer(fleet_gateway, bike_status_reader):
    return FleetSynchronizer(fleet_gateway, bike_status_reader)


@pytest.fixture
def rental_orchestrator(session, fleet_gateway, token_gateway, fleet_synchronizer):
    return RentalOrchestrator(session, fleet_gateway, token_gateway, fleet_synchronizer)


@pytest.fixture
async def started_orchestrator(rental_orchestrator, registered_account):
    """An orchestrator for a signed in and registered account, at home."""
    await rental_orchestrator._rebuild()
    return rental_orchestrator

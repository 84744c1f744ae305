"""
Shared test fixtures
"""

import json

import pytest
from unittest.mock import AsyncMock, Mock
from loguru import logger


SENDER = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
DEPLOYED_ADDRESS = '0x5fbdb2315678afecb367f032d93f642f64180aa3'
TEST_PRIVATE_KEY = '0x' + '11' * 32


class Resolved:
    """Awaitable standing in for web3's async properties (gas_price, chain_id...)"""

    def __init__(self, value):
        self.value = value

    def __await__(self):
        return self._resolve().__await__()

    async def _resolve(self):
        if isinstance(self.value, Exception):
            raise self.value
        return self.value


@pytest.fixture
def resolved():
    return Resolved


@pytest.fixture(autouse=True)
def reset_logger(monkeypatch):
    """Drop loguru sinks bound to captured streams"""
    monkeypatch.delenv('LOG_LEVEL', raising=False)
    monkeypatch.delenv('LOG_FILE', raising=False)
    yield
    logger.remove()


@pytest.fixture
def account():
    """Signer stub: records what it signs"""
    signer = Mock()
    signer.address = SENDER
    signer.sign_transaction.return_value = Mock(raw_transaction=b'\x02signed')
    return signer


@pytest.fixture
def constructor():
    """Contract constructor call returned by Contract.constructor()"""
    call = Mock()
    call.estimate_gas = AsyncMock(return_value=1000000)
    call.build_transaction = AsyncMock(side_effect=lambda tx: dict(tx, data='0x6080'))
    return call


@pytest.fixture
def deployed_contract():
    return Mock(address=DEPLOYED_ADDRESS)


@pytest.fixture
def w3(constructor, deployed_contract):
    """AsyncWeb3 stub for a healthy EIP-1559 chain"""
    web3 = Mock()

    contract_cls = Mock()
    contract_cls.constructor.return_value = constructor

    def contract(**kwargs):
        return deployed_contract if 'address' in kwargs else contract_cls

    web3.eth.contract = Mock(side_effect=contract)
    web3.eth.get_transaction_count = AsyncMock(return_value=7)
    web3.eth.get_block = AsyncMock(return_value={'baseFeePerGas': 10 ** 9})
    web3.eth.max_priority_fee = Resolved(2 * 10 ** 9)
    web3.eth.gas_price = Resolved(3 * 10 ** 9)
    web3.eth.chain_id = Resolved(31337)
    web3.eth.send_raw_transaction = AsyncMock(return_value=b'\xaa' * 32)
    web3.eth.wait_for_transaction_receipt = AsyncMock(return_value={
        'status': 1,
        'contractAddress': DEPLOYED_ADDRESS,
        'gasUsed': 950000
    })
    return web3


@pytest.fixture
def artifacts_dir(tmp_path):
    """Hardhat-style artifacts tree holding a compiled DealClient"""
    root = tmp_path / 'artifacts'
    contract_dir = root / 'contracts' / 'DealClient.sol'
    contract_dir.mkdir(parents=True)

    (contract_dir / 'DealClient.json').write_text(json.dumps({
        '_format': 'hh-sol-artifact-1',
        'contractName': 'DealClient',
        'sourceName': 'contracts/DealClient.sol',
        'abi': [{'inputs': [], 'stateMutability': 'nonpayable', 'type': 'constructor'}],
        'bytecode': '0x608060405234801561001057600080fd5b50',
        'deployedBytecode': '0x6080'
    }))
    (contract_dir / 'DealClient.dbg.json').write_text(json.dumps({'buildInfo': '../../build-info/x.json'}))

    build_info = root / 'build-info'
    build_info.mkdir()
    (build_info / 'x.json').write_text('{}')

    return root

from dataclasses import dataclass

from eth_utils import is_address, to_checksum_address

MAX_UINT8 = 2**8 - 1


@dataclass(frozen=True)
class NetworkConfig:
    """
    @notice Chain identity for a network the token lives on
    @dev `name` matches the `[networks.<name>]` table in moccasin.toml
    """

    name: str
    chain_id: int
    symbol: str
    explorer_name: str
    explorer_url: str

    def contract_url(self, address: str) -> str:
        return f"{self.explorer_url}/address/{to_checksum_address(address)}"


BSC_TESTNET = NetworkConfig(
    name="bsc-testnet",
    chain_id=97,
    symbol="tBNB",
    explorer_name="Bscscan",
    explorer_url="https://testnet.bscscan.com",
)

BSC_MAINNET = NetworkConfig(
    name="bsc-mainnet",
    chain_id=56,
    symbol="BNB",
    explorer_name="Bscscan",
    explorer_url="https://bscscan.com",
)


@dataclass(frozen=True)
class TokenConfig:
    """
    @notice Immutable token parameters used to deploy and check the contract
    @dev `max_supply` is expressed in whole tokens; see `total_supply`
    """

    contract_name: str
    public_name: str
    symbol: str
    decimals: int
    max_supply: int
    testnet: NetworkConfig
    mainnet: NetworkConfig
    contract_address: str | None = None

    def __post_init__(self):
        if isinstance(self.decimals, bool) or not isinstance(self.decimals, int):
            raise ValueError(f"decimals must be an integer, got {self.decimals!r}")
        if not 0 <= self.decimals <= MAX_UINT8:
            raise ValueError(f"decimals must fit in a uint8, got {self.decimals}")
        if isinstance(self.max_supply, bool) or not isinstance(self.max_supply, int):
            raise ValueError(f"max_supply must be an integer, got {self.max_supply!r}")
        if self.max_supply <= 0:
            raise ValueError(f"max_supply must be positive, got {self.max_supply}")
        if self.contract_address is not None:
            if not is_address(self.contract_address):
                raise ValueError(f"invalid contract address {self.contract_address!r}")
            object.__setattr__(
                self, "contract_address", to_checksum_address(self.contract_address)
            )

    @property
    def total_supply(self) -> int:
        return self.to_base_units(self.max_supply)

    def to_base_units(self, amount: int) -> int:
        """Scale a whole-token amount by 10**decimals."""
        return amount * 10**self.decimals

    def network_for(self, is_mainnet: bool) -> NetworkConfig:
        return self.mainnet if is_mainnet else self.testnet

    def network_named(self, name: str) -> NetworkConfig | None:
        for network in (self.testnet, self.mainnet):
            if network.name == name:
                return network
        return None

    def constructor_arguments(self) -> tuple:
        # Keep in the same order as the contract's __init__ parameters
        return (self.contract_name, self.symbol, self.decimals, self.max_supply)


TOKEN_CONFIG = TokenConfig(
    contract_name="B8DEX",
    public_name="B8DEX",
    symbol="B8T",
    decimals=18,
    max_supply=1_000_000_000,
    testnet=BSC_TESTNET,
    mainnet=BSC_MAINNET,
    contract_address="0x4dcca80514c13dacbd4a00c4e8db891592a89306",
)

CONTRACT_ARGUMENTS = TOKEN_CONFIG.constructor_arguments()

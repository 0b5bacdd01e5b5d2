"""Seed prices and per-pair parameters for the trade simulator."""

from .pairs import TradingPair

# Rough starting prices (quote currency per ETH)
SEED_PRICES: dict[TradingPair, float] = {
    TradingPair.ETH_USDC: 2500.00,
    TradingPair.ETH_USDT: 2500.00,
    TradingPair.ETH_BTC: 0.05,
}

# Decimal places reported per pair
PRICE_DECIMALS: dict[TradingPair, int] = {
    TradingPair.ETH_USDC: 2,
    TradingPair.ETH_USDT: 2,
    TradingPair.ETH_BTC: 6,
}

# Per-pair GBM parameters
# sigma: annualized volatility, mu: annualized drift
PAIR_PARAMS: dict[TradingPair, dict[str, float]] = {
    TradingPair.ETH_USDC: {"sigma": 0.75, "mu": 0.05},
    TradingPair.ETH_USDT: {"sigma": 0.75, "mu": 0.05},
    TradingPair.ETH_BTC: {"sigma": 0.50, "mu": 0.0},  # Crypto-quoted, lower vol
}

# Correlation coefficients
STABLECOIN_CORR = 0.98  # ETH/USDC and ETH/USDT are nearly the same market
CROSS_QUOTE_CORR = 0.5  # Stablecoin-quoted vs BTC-quoted

"""
Valuation Configuration

Centralized configuration for the valuation and risk engine. This allows:
1. One place for every numeric convention (annualization, risk-free rate)
2. Reproducible demo runs via a fixed random seed
3. Swapping conventions without code changes - just swap configuration files

Usage:
    from ml4t.valuation import ValuationConfig

    # Load default config
    config = ValuationConfig()

    # Load preset (e.g., seeded simulator for tests)
    config = ValuationConfig.from_preset("deterministic")

    # Load from file
    config = ValuationConfig.from_yaml("my_config.yaml")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

# Export presets directory path for users who want to load custom YAML files
PRESETS_DIR = Path(__file__).parent / "presets"


@dataclass
class ValuationConfig:
    """
    Complete configuration for valuation, risk and simulation behavior.

    The risk conventions mix bases: returns are annualized with
    ``trading_days`` (252) while volatility uses ``annualization_days`` (365)
    and a fixed ``return_window`` divisor.
    """

    # === Risk ===
    risk_free_rate: float = 0.05
    trading_days: int = 252  # Annualizes mean return for Sharpe
    annualization_days: int = 365  # Annualizes variance
    return_window: int = 365  # Max days in portfolio series; also the mean/variance divisor
    default_beta: float = 1.0  # Beta for symbols missing from the reference table
    delta_placeholder: float = 0.85  # Not derived from positions

    # === Synthetic return history ===
    synthetic_mean: float = 0.08  # Annualized
    synthetic_std: float = 0.20  # Annualized

    # === Price simulator ===
    refresh_interval: float = 10.0  # Seconds between ticks
    price_shock: float = 0.10  # Security prices drawn in buy_price * [1 - x, 1 + x]
    fx_fluctuation: float = 0.01  # FX rates move up to +/- x per tick
    holding_variation: float = 0.005  # Futures holdings move up to +/- x around entry
    rate_jitter: float = 0.02  # random_rate() moves up to +/- x
    seed: int | None = None

    # === Metadata ===
    preset_name: str | None = None

    def validate(self, warn: bool = True) -> list[str]:
        """Validate configuration and return warnings for edge cases.

        Args:
            warn: If True, emit warnings via warnings.warn(). Default True.

        Returns:
            List of warning message strings (empty if no issues found).

        Example:
            config = ValuationConfig(return_window=0)
            issues = config.validate()
            # ["return_window (0) must be positive"]
        """
        import warnings as _warnings

        issues: list[str] = []

        for name in ("trading_days", "annualization_days", "return_window"):
            value = getattr(self, name)
            if value <= 0:
                issues.append(f"{name} ({value}) must be positive")

        if self.return_window > self.annualization_days:
            issues.append(
                f"return_window ({self.return_window}) exceeds annualization_days "
                f"({self.annualization_days}); volatility will be overstated."
            )

        if self.synthetic_std < 0:
            issues.append(f"synthetic_std ({self.synthetic_std}) must be non-negative")

        if self.refresh_interval <= 0:
            issues.append(f"refresh_interval ({self.refresh_interval}) must be positive")

        for name in ("price_shock", "fx_fluctuation", "holding_variation", "rate_jitter"):
            value = getattr(self, name)
            if not 0.0 <= value < 1.0:
                issues.append(f"{name} ({value}) must be in [0.0, 1.0)")

        if not -1.0 < self.risk_free_rate < 1.0:
            issues.append(
                f"risk_free_rate ({self.risk_free_rate}) looks like a percentage; "
                "use a fraction (0.05 for 5%)."
            )

        if warn and issues:
            for msg in issues:
                _warnings.warn(msg, UserWarning, stacklevel=2)

        return issues

    def to_dict(self) -> dict:
        """Convert config to dictionary for serialization."""
        return {
            "risk": {
                "risk_free_rate": self.risk_free_rate,
                "trading_days": self.trading_days,
                "annualization_days": self.annualization_days,
                "return_window": self.return_window,
                "default_beta": self.default_beta,
                "delta_placeholder": self.delta_placeholder,
            },
            "synthetic_returns": {
                "mean": self.synthetic_mean,
                "std": self.synthetic_std,
            },
            "simulator": {
                "refresh_interval": self.refresh_interval,
                "price_shock": self.price_shock,
                "fx_fluctuation": self.fx_fluctuation,
                "holding_variation": self.holding_variation,
                "rate_jitter": self.rate_jitter,
                "seed": self.seed,
            },
        }

    @classmethod
    def from_dict(cls, data: dict, preset_name: str | None = None) -> ValuationConfig:
        """Create config from dictionary."""
        risk_cfg = data.get("risk", {})
        synth_cfg = data.get("synthetic_returns", {})
        sim_cfg = data.get("simulator", {})

        return cls(
            # Risk
            risk_free_rate=risk_cfg.get("risk_free_rate", 0.05),
            trading_days=risk_cfg.get("trading_days", 252),
            annualization_days=risk_cfg.get("annualization_days", 365),
            return_window=risk_cfg.get("return_window", 365),
            default_beta=risk_cfg.get("default_beta", 1.0),
            delta_placeholder=risk_cfg.get("delta_placeholder", 0.85),
            # Synthetic history
            synthetic_mean=synth_cfg.get("mean", 0.08),
            synthetic_std=synth_cfg.get("std", 0.20),
            # Simulator
            refresh_interval=sim_cfg.get("refresh_interval", 10.0),
            price_shock=sim_cfg.get("price_shock", 0.10),
            fx_fluctuation=sim_cfg.get("fx_fluctuation", 0.01),
            holding_variation=sim_cfg.get("holding_variation", 0.005),
            rate_jitter=sim_cfg.get("rate_jitter", 0.02),
            seed=sim_cfg.get("seed"),
            # Metadata
            preset_name=preset_name,
        )

    def to_yaml(self, path: str | Path) -> None:
        """Save config to YAML file."""
        path = Path(path)
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ValuationConfig:
        """Load config from YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data, preset_name=path.stem)

    @classmethod
    def from_preset(cls, preset: str) -> ValuationConfig:
        """
        Load a predefined configuration preset from PRESETS_DIR.

        Available presets:
        - "default": Conventions of the production dashboard
        - "demo": Faster refresh for interactive demos
        - "deterministic": Seeded simulator, for tests and reproducible reports
        """
        path = PRESETS_DIR / f"{preset}.yaml"
        if not path.exists():
            available = ", ".join(sorted(p.stem for p in PRESETS_DIR.glob("*.yaml")))
            raise ValueError(f"Unknown preset '{preset}'. Available: {available}")
        return cls.from_yaml(path)

    def describe(self) -> str:
        """Human-readable summary of the configuration."""
        lines = [
            f"ValuationConfig ({self.preset_name or 'custom'})",
            "",
            "Risk:",
            f"  Risk-free rate: {self.risk_free_rate:.2%}",
            f"  Return annualization: x{self.trading_days}",
            f"  Variance annualization: x{self.annualization_days}",
            f"  Return window: {self.return_window} days",
            f"  Default beta: {self.default_beta}",
            f"  Delta (placeholder): {self.delta_placeholder}",
            "",
            "Synthetic returns:",
            f"  Mean: {self.synthetic_mean:.1%}  Std: {self.synthetic_std:.1%}",
            "",
            "Simulator:",
            f"  Refresh: every {self.refresh_interval:g}s",
            f"  Price shock: +/-{self.price_shock:.1%}",
            f"  FX fluctuation: +/-{self.fx_fluctuation:.1%}",
            f"  Seed: {self.seed if self.seed is not None else 'random'}",
        ]
        return "\n".join(lines)

"""Monte Carlo counterfactual regret minimization for extensive-form games."""

__version__ = "0.1.1"

__all__ = ["blueprint", "profile", "protocols", "rps", "transport", "tree"]
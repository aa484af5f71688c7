"""
Gas formatting utilities for human-readable output.
"""


def format_gas(gas: int) -> str:
    """
    Format a gas amount to a human-readable string.
    
    Args:
        gas: Gas amount
        
    Returns:
        Formatted gas string (e.g., "950 gas", "12.50K gas", "1.20M gas")
    """
    if gas < 1000:
        return f"{gas} gas"
    elif gas < 1_000_000:
        return f"{gas/1000:.2f}K gas"
    elif gas < 1_000_000_000:
        return f"{gas/1_000_000:.2f}M gas"
    else:
        return f"{gas/1_000_000_000:.2f}B gas"


def format_percentage(percentage: float) -> str:
    """Format a percentage with two decimals, e.g. "12.34%"."""
    return f"{percentage:.2f}%"

"""
Collapsed-stack text output.
"""

from typing import List

from ..core.types import CollapsedStack


def stacks_to_collapsed_format(stacks: List[CollapsedStack]) -> str:
    """
    Convert stacks to the collapsed text format, one "stack weight" line each.
    
    Frame names are not escaped; a literal ';' inside a name will read as a
    frame boundary to the renderer.
    """
    return '\n'.join(stack.to_line() for stack in stacks)


def generate_text_summary(stacks: List[CollapsedStack], max_lines: int) -> str:
    """
    Generate a plain-text table of the heaviest stacks.
    
    Args:
        stacks: Collapsed stacks, already ranked
        max_lines: Maximum number of stacks to list
        
    Returns:
        Human-readable text representation
    """
    lines = ["Top Gas Consumers:", "-" * 80]
    
    for i, stack in enumerate(stacks[:max_lines], start=1):
        lines.append(f"{i:>3}. {stack.weight:>10} gas | {stack.stack}")
    
    if len(stacks) > max_lines:
        lines.append(f"... and {len(stacks) - max_lines} more stacks")
    
    return '\n'.join(lines)

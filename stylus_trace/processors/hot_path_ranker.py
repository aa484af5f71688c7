"""
Hot-path ranking and small-stack merging.
"""

from typing import List

from ..core.types import CollapsedStack, HotPath

OTHER_STACK = 'other'


class HotPathRanker:
    """Orders collapsed stacks by weight and derives hot paths."""
    
    @staticmethod
    def rank_stacks(stacks: List[CollapsedStack]) -> List[CollapsedStack]:
        """
        Sort stacks by weight descending, then by stack string ascending.
        
        The secondary key makes the order reproducible when weights tie.
        """
        return sorted(stacks, key=lambda s: (-s.weight, s.stack))
    
    @staticmethod
    def percentage(weight: int, total_gas: int) -> float:
        """Share of total gas in percent, 0.0 when total gas is unknown."""
        if total_gas <= 0:
            return 0.0
        return weight / total_gas * 100.0
    
    def calculate_hot_paths(
        self,
        stacks: List[CollapsedStack],
        total_gas: int,
        top_n: int
    ) -> List[HotPath]:
        """
        Select the top_n heaviest stacks as hot paths.
        
        Args:
            stacks: Collapsed stacks from the aggregator (any order)
            total_gas: Total gas of the transaction
            top_n: Maximum number of hot paths to return
            
        Returns:
            Hot paths, heaviest first, at most top_n long
        """
        if top_n <= 0:
            return []
        
        return [
            HotPath(
                stack=stack.stack,
                gas=stack.weight,
                percentage=self.percentage(stack.weight, total_gas),
            )
            for stack in self.rank_stacks(stacks)[:top_n]
        ]


def merge_small_stacks(stacks: List[CollapsedStack], threshold: int) -> List[CollapsedStack]:
    """
    Fold stacks lighter than threshold into a single "other" stack.
    
    Keeps the total weight unchanged. The "other" stack is appended only
    when the folded weight is positive; if the input already has an "other"
    stack above the threshold, the folded weight is added to it.
    
    Args:
        stacks: Collapsed stacks
        threshold: Minimum weight to keep a stack on its own
        
    Returns:
        Merged stacks
    """
    merged = []
    other_weight = 0
    
    for stack in stacks:
        if stack.weight >= threshold:
            merged.append(stack)
        else:
            other_weight += stack.weight
    
    if other_weight > 0:
        for index, stack in enumerate(merged):
            if stack.stack == OTHER_STACK:
                merged[index] = CollapsedStack(OTHER_STACK, stack.weight + other_weight)
                break
        else:
            merged.append(CollapsedStack(OTHER_STACK, other_weight))
    
    return merged

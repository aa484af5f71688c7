"""
Result builder for web interface output.
"""

from ..formatters import format_gas, format_percentage


def prepare_results(result, max_stacks: int = 100):
    """
    Convert a profiling result to a structured format for JSON output.
    
    The 'profile' section is exactly the persisted profile document; the
    other sections add display-ready values for the UI.
    
    Args:
        result: ProfileResult from TraceProfiler
        max_stacks: Maximum number of collapsed stacks to include
        
    Returns:
        Dictionary with structured results for rendering
    """
    parsed = result.parsed_trace
    profile = result.profile
    
    hot_paths = []
    for rank, hot_path in enumerate(result.hot_paths, start=1):
        hot_paths.append({
            'rank': rank,
            'stack': hot_path.stack,
            'frames': hot_path.stack.split(';'),
            'gas': hot_path.gas,
            'gas_formatted': format_gas(hot_path.gas),
            'percentage': hot_path.percentage,
            'percentage_formatted': format_percentage(hot_path.percentage),
        })
    
    hostio_breakdown = [
        {'type': kind, 'count': count}
        for kind, count in sorted(profile.hostio_summary.by_type.items(), key=lambda item: (-item[1], item[0]))
    ]
    
    stacks = [
        {'stack': stack.stack, 'weight': stack.weight}
        for stack in result.stacks[:max_stacks]
    ]
    
    return {
        'profile': profile.to_dict(),
        'summary': {
            'transaction_hash': profile.transaction_hash,
            'total_gas': profile.total_gas,
            'total_gas_formatted': format_gas(profile.total_gas),
            'total_gas_backfilled': result.total_gas_backfilled,
            'step_count': len(parsed.execution_steps),
            'dropped_steps': parsed.dropped_steps,
            'unique_stacks': len(result.stacks),
            'hostio_calls': profile.hostio_summary.total_calls,
            'hostio_gas_formatted': format_gas(profile.hostio_summary.total_hostio_gas),
        },
        'hot_paths': hot_paths,
        'hostio_breakdown': hostio_breakdown,
        'stacks': stacks,
        'stacks_truncated': len(result.stacks) > max_stacks,
    }

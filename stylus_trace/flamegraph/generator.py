"""
SVG flamegraph generation through an external flame-layout renderer.

Layout, colouring and interactivity are left to inferno-flamegraph or
Brendan Gregg's flamegraph.pl; this module feeds them collapsed stacks.
"""

import logging
import shutil
import subprocess
from enum import Enum
from typing import List, Optional

from ..core.errors import EmptyStacks, GenerationFailed, RendererNotFound
from ..core.types import CollapsedStack
from ..formatters.collapsed_formatter import stacks_to_collapsed_format

logger = logging.getLogger(__name__)

# Looked up on PATH in this order
RENDERERS = ('inferno-flamegraph', 'flamegraph.pl')
SUBTITLE = "Generated by Stylus Trace Studio"


class FlamegraphPalette(Enum):
    """Colour palettes understood by the renderers."""
    HOT = 'hot'
    MEM = 'mem'
    IO = 'io'
    JAVA = 'java'
    # Renderers have no "consistent" palette; aqua is the closest
    CONSISTENT = 'aqua'


def parse_palette(palette_str: str) -> FlamegraphPalette:
    """Parse a palette name, falling back to hot for unknown names."""
    name = palette_str.lower()
    if name == 'consistent':
        return FlamegraphPalette.CONSISTENT
    for palette in FlamegraphPalette:
        if palette.value == name:
            return palette
    logger.warning("Unknown palette '%s', using 'hot'", palette_str)
    return FlamegraphPalette.HOT


class FlamegraphConfig:
    """Flamegraph appearance options."""
    
    def __init__(
        self,
        title: str = "Stylus Transaction Profile",
        count_name: str = "gas",
        palette: FlamegraphPalette = FlamegraphPalette.HOT,
        min_width: float = 0.1,
        image_width: Optional[int] = 1200,
        reverse: bool = False
    ):
        """
        Initialize flamegraph configuration.
        
        Args:
            title: Title displayed at the top of the flamegraph
            count_name: What the weight represents, shown in tooltips
            palette: Colour palette
            min_width: Minimum frame width in pixels to draw
            image_width: Image width in pixels, None for renderer default
            reverse: If True, draw an icicle graph (root at the top)
        """
        self.title = title
        self.count_name = count_name
        self.palette = palette
        self.min_width = min_width
        self.image_width = image_width
        self.reverse = reverse
    
    def with_title(self, title: str) -> 'FlamegraphConfig':
        self.title = title
        return self
    
    def with_palette(self, palette: FlamegraphPalette) -> 'FlamegraphConfig':
        self.palette = palette
        return self
    
    def with_width(self, width: int) -> 'FlamegraphConfig':
        self.image_width = width
        return self
    
    def __repr__(self) -> str:
        return (f"FlamegraphConfig(title={self.title!r}, count_name={self.count_name!r}, "
                f"palette={self.palette.name}, min_width={self.min_width}, "
                f"image_width={self.image_width}, reverse={self.reverse})")


def find_renderer() -> str:
    """
    Locate a flame-layout renderer on PATH.
    
    Raises:
        RendererNotFound: If none of RENDERERS is installed
    """
    for name in RENDERERS:
        path = shutil.which(name)
        if path:
            return path
    raise RendererNotFound(
        f"No flamegraph renderer found on PATH (install one of: {', '.join(RENDERERS)})"
    )


def build_renderer_args(config: FlamegraphConfig) -> List[str]:
    """Command-line options shared by inferno-flamegraph and flamegraph.pl."""
    args = [
        '--title', config.title,
        '--subtitle', SUBTITLE,
        '--countname', config.count_name,
        '--colors', config.palette.value,
        '--minwidth', str(config.min_width),
    ]
    if config.image_width is not None:
        args += ['--width', str(config.image_width)]
    if config.reverse:
        args.append('--inverted')
    return args


def generate_flamegraph(
    stacks: List[CollapsedStack],
    config: Optional[FlamegraphConfig] = None
) -> str:
    """
    Generate an SVG flamegraph from collapsed stacks.
    
    Args:
        stacks: Collapsed stacks from the aggregator
        config: Flamegraph configuration (defaults if None)
        
    Returns:
        SVG content as a string
        
    Raises:
        EmptyStacks: If there are no stacks to visualize
        RendererNotFound: If no renderer is installed
        GenerationFailed: If the renderer fails or does not produce SVG
    """
    if not stacks:
        raise EmptyStacks()
    
    config = config or FlamegraphConfig()
    
    logger.info("Generating flamegraph with %d stacks", len(stacks))
    logger.debug("Flamegraph config: %r", config)
    
    collapsed_input = stacks_to_collapsed_format(stacks) + '\n'
    cmd = [find_renderer()] + build_renderer_args(config)
    
    try:
        proc = subprocess.run(cmd, input=collapsed_input, capture_output=True, text=True)
    except OSError as e:
        raise GenerationFailed(f"Could not run {cmd[0]}: {e}") from e
    
    if proc.returncode != 0:
        raise GenerationFailed(
            f"{cmd[0]} exited with code {proc.returncode}: {proc.stderr.strip()}"
        )
    
    svg_content = proc.stdout
    if '<svg' not in svg_content:
        raise GenerationFailed(f"{cmd[0]} did not produce SVG output")
    
    logger.info("Flamegraph generated successfully (%d bytes)", len(svg_content))
    return svg_content

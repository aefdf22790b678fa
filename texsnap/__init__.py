"""
texsnap - LaTeX snippet to image rendering

Renders a snippet of LaTeX (math notation or a TikZ drawing) into a PNG or SVG
image by driving latex followed by dvipng or dvisvgm.

Architecture:
- Templating Context: Document assembly from built-in or custom templates
- Rendering Context: Compilation, conversion, and per-request workspaces
- Serving Context: HTTP surface for compile and template store operations
"""

__version__ = "0.1.0"

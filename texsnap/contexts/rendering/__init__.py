"""
Rendering Context

Responsibilities:
- Resolves colors into the forms latex, dvipng, and dvisvgm need
- Allocates per-request workspaces in the scratch directory
- Runs latex, then dvipng or dvisvgm, and translates failures into diagnostics
- Post-processes SVG output (background rectangle)

Owns: external tool invocation, scratch files, compiled artifacts
Never: Chooses or edits template content (see templating context)
"""

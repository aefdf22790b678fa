"""
Templating Context

Responsibilities:
- Assembles the LaTeX document handed to the compiler
- Substitutes {{ PLACEHOLDER }} tokens in built-in and custom templates
- Stores named templates (JSON file) for callers to reuse

Owns: document text, template files, the named-template store
Never: Runs external tools or touches the scratch directory
"""

"""apitree -- Turn OpenAPI 3.x documents into code-generator inputs.

The parser reads an API description and produces two collections:

* a flat list of data models (component schemas, request bodies, query
  parameter bundles), and
* a tree of path nodes: one node per resource, with its path parameter, the
  parameter's implicit default and the operations available there.

Typical workflow::

    apitree parse rc-platform.yml -o parsed.json   # models + paths as JSON
    apitree paths rc-platform.yml                  # inspect the path tree

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Document loading and model extraction.
    paths: Path tree construction.
"""

__version__ = "0.3.0"

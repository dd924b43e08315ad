from project_context.cli import cli

cli()

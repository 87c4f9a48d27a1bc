"""lspinstall CLI — click command group and subcommands."""

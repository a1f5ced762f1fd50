"""CLI subcommands for flowstate (loaded lazily by ``flowstate.cli``)."""

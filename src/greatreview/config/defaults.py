"""Starter .greatreview.toml template."""

DEFAULT_TOML = """\
# great-review configuration
version = "1.0"

[diff]
# context_lines = 3         # lines of context around each change (git --unified)
# default_range = "main..HEAD"

[git]
timeout = 30                # seconds per git invocation

[remote]
ssh_command = "ssh"
connect_timeout = 5         # seconds; ssh always runs non-interactively
command_timeout = 60
# default = "user@host:/srv/repo"

[output]
format = "terminal"         # terminal | json
show_line_numbers = true
show_summary = true

[log]
level = "WARNING"           # DEBUG | INFO | WARNING | ERROR
# file = "great-review.log"
"""

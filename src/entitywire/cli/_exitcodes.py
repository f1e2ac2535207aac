"""Process exit codes for the entitywire CLI."""

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2
CODEC_ERROR = 3

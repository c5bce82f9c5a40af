"""g213-cols version information."""

__version__ = "0.4.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.1.0 - Initial release: whole keyboard colour from a hex argument
# 0.2.0 - X11 colour names (multi-word, case and underscore insensitive),
#         region, breathe and cycle commands, speed clamped to 32 ms
# 0.3.0 - 'regions' command: five colours from one token list, greedy
#         multi-word matching, last colour fills the remaining regions;
#         'random' and 'randomx11' colours, 3-digit hex shorthand
# 0.4.0 - Kernel driver always reattached after a failed transfer, typed
#         USB errors, configurable transfer timeout, 'colours' and 'help'

"""Network file loading and the query path language.

Load a network directory with `netpath.dsl.loader.load_network_from_directory`
and evaluate paths against it with `netpath.dsl.query`.
"""

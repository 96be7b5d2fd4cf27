"""Tag-aware metrics wrappers, with a caching registry, over a pluggable metrics backend."""
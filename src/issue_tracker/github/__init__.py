"""GitHub integration: credential resolution, API client and the `push` publisher."""

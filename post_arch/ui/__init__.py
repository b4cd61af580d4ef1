# post_arch/ui/__init__.py

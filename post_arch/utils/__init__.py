# post_arch/utils/__init__.py

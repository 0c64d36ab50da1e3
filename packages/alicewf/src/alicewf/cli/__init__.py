# packages/alicewf/src/alicewf/cli/__init__.py

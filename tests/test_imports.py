def test_import_storydoc_package() -> None:
    import importlib

    module = importlib.import_module("storydoc")
    assert module.__version__
    assert callable(module.parse)


def test_public_api_exports() -> None:
    import storydoc

    for name in storydoc.__all__:
        assert hasattr(storydoc, name)

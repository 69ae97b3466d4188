"""Mock restaurant API used to exercise the storefront"""

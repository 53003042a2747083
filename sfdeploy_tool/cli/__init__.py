"""Command line interface for sfdeploy-tool"""

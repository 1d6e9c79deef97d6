"""Dispatch: the request pipeline from route lookup to normalized response."""

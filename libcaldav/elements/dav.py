#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from .base import ValuedBaseElement
from libcaldav.lib.namespace import ns


# Operations
class Propfind(BaseElement):
    tag: ClassVar[str] = ns("D", "propfind")


class LockInfo(BaseElement):
    tag: ClassVar[str] = ns("D", "lockinfo")


# Components / Data
class Prop(BaseElement):
    tag: ClassVar[str] = ns("D", "prop")


class Href(BaseElement):
    tag: ClassVar[str] = ns("D", "href")


class Response(BaseElement):
    tag: ClassVar[str] = ns("D", "response")


class Status(BaseElement):
    tag: ClassVar[str] = ns("D", "status")


class PropStat(BaseElement):
    tag: ClassVar[str] = ns("D", "propstat")


class MultiStatus(BaseElement):
    tag: ClassVar[str] = ns("D", "multistatus")


# Locking, rfc4918 section 14
class LockScope(BaseElement):
    tag: ClassVar[str] = ns("D", "lockscope")


class LockType(BaseElement):
    tag: ClassVar[str] = ns("D", "locktype")


class Exclusive(BaseElement):
    tag: ClassVar[str] = ns("D", "exclusive")


class Write(BaseElement):
    tag: ClassVar[str] = ns("D", "write")


class Owner(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "owner")


class LockToken(BaseElement):
    tag: ClassVar[str] = ns("D", "locktoken")


# Properties
class DisplayName(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "displayname")


class GetEtag(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "getetag")

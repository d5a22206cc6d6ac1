#!/usr/bin/env python
import sys
from collections.abc import Iterable
from typing import ClassVar
from typing import Dict
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from libcaldav.lib.namespace import nsmap
from libcaldav.lib.python_utilities import to_unicode

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


class BaseElement:
    """
    A node in a request document.  Nodes are put together with ``+``,
    which appends to the left hand side and returns it::

        Prop() + [GetEtag(), CalendarData()]

    Nothing is rendered until xmlelement() is called.
    """

    tag: ClassVar[Optional[str]] = None

    def __init__(
        self, name: Optional[str] = None, value: Union[str, bytes, None] = None
    ) -> None:
        self.children: List[BaseElement] = []
        self.attributes: Dict[str, str] = {}
        if name is not None:
            self.attributes["name"] = name
        self.value: Optional[str] = to_unicode(value)

    def __add__(self, other: Union["BaseElement", Iterable]) -> Self:
        return self.append(other)

    def append(self, element: Union["BaseElement", Iterable]) -> Self:
        if isinstance(element, BaseElement):
            self.children.append(element)
        else:
            self.children.extend(element)
        return self

    def xmlelement(self) -> _Element:
        if self.tag is None:
            raise ValueError("%s has no tag" % self.__class__.__name__)
        root = etree.Element(self.tag, attrib=self.attributes, nsmap=nsmap)
        root.text = self.value
        for child in self.children:
            root.append(child.xmlelement())
        return root

    def __str__(self) -> str:
        return etree.tostring(
            self.xmlelement(), encoding="utf-8", xml_declaration=True, pretty_print=True
        ).decode("utf-8")

    def __repr__(self) -> str:
        return "<%s>" % self.__class__.__name__


class NamedBaseElement(BaseElement):
    """An element that is useless without a name attribute (comp-filter)"""

    def __init__(self, name: Optional[str] = None) -> None:
        super().__init__(name=name)

    def xmlelement(self) -> _Element:
        if not self.attributes.get("name"):
            raise ValueError("%s needs a name" % self.tag)
        return super().xmlelement()


class ValuedBaseElement(BaseElement):
    def __init__(self, value: Union[str, bytes, None] = None) -> None:
        super().__init__(value=value)

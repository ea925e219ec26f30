"""
WhatsApp deep links for order capture.

Messages are built from the frozen price snapshots on orders and cart lines,
never from the live rate.
"""

import logging
import re
from typing import Optional
from urllib.parse import quote

from craft_pricing.core.config import settings
from craft_pricing.core.timezone import to_local, utcnow
from craft_pricing.models.cart import Cart
from craft_pricing.models.order import Order

logger = logging.getLogger("craft_pricing.messaging")

STORE_NAME = "WELCOME-CRAFT"


def _money(value: Optional[float]) -> str:
    if value is None:
        return "Price on request"
    if float(value).is_integer():
        return f"Rs. {int(value):,}"
    return f"Rs. {value:,.2f}"


def build_whatsapp_link(phone_number: str, message: str) -> str:
    digits = re.sub(r"[^0-9]", "", phone_number)
    return f"https://wa.me/{digits}?text={quote(message)}"


def format_order_message(order: Order) -> str:
    product = order.product
    lines = [
        "*NEW ORDER RECEIVED*",
        "",
        f"*Order ID:* {order.order_id}",
        f"*Date:* {to_local(order.created_at or utcnow()):%Y-%m-%d %H:%M}",
        "",
        "*PRODUCT DETAILS*",
        f"*Name:* {product.title if product else 'N/A'}",
        f"*Category:* {product.category.name if product and product.category else 'N/A'}",
    ]
    if product is not None and product.weight_in_tola:
        lines.append(f"*Weight:* {product.weight_in_tola} tola")
    if product is not None and product.height:
        lines.append(f"*Height:* {product.height}")
    if order.customization:
        lines.append(f"*Customization:* {order.customization}")

    lines += ["", "*PRICING*", f"*Quantity:* {order.quantity}"]
    if order.total_price is not None:
        lines.append(f"*Total Price:* {_money(order.total_price)}")
    else:
        lines.append("*Price:* To be determined")
    if order.silver_price_snapshot:
        lines.append(f"*Silver Price Rate:* {_money(order.silver_price_snapshot)} per tola")

    lines += [
        "",
        "*CUSTOMER DETAILS*",
        f"*Name:* {order.customer_name}",
        f"*Contact:* {order.customer_phone}",
    ]
    if order.customer_email:
        lines.append(f"*Email:* {order.customer_email}")
    if order.customer_address:
        lines.append(f"*Address:* {order.customer_address}")

    lines += [
        "",
        "*ADDITIONAL NOTES*",
        order.notes or "No additional notes",
        "",
        "Please confirm this order with the customer.",
    ]
    return "\n".join(lines)


def format_cart_message(cart: Cart) -> str:
    lines = [f"*NEW ORDER FROM {STORE_NAME}*", ""]

    if cart.customer_name:
        lines += [
            "*Customer Details:*",
            f"Name: {cart.customer_name}",
            f"Phone: {cart.customer_phone}",
        ]
        if cart.customer_email:
            lines.append(f"Email: {cart.customer_email}")
        if cart.customer_address:
            lines.append(f"Address: {cart.customer_address}")
        lines.append("")

    lines.append(f"*Order Items ({cart.total_items} items):*")
    for index, item in enumerate(cart.items, start=1):
        product = item.product
        lines += [
            "",
            f"{index}. *{product.title}*",
            f"   Category: {product.category.name if product.category else 'N/A'}",
            f"   Quantity: {item.quantity}",
        ]
        if item.price_snapshot is None:
            lines.append("   Price: On request")
        else:
            lines.append(f"   Price: {_money(item.price_snapshot)} each")
            lines.append(f"   Subtotal: {_money(item.price_snapshot * item.quantity)}")
        if item.customization:
            lines.append(f"   *Custom Requirements:* {item.customization}")

    lines += ["", f"*Total Amount: {_money(cart.subtotal)}*"]
    if any(item.price_snapshot is None for item in cart.items):
        lines.append("(some items are priced on request)")
    if cart.order_notes:
        lines += ["", "*Order Notes:*", cart.order_notes]

    lines += [
        "",
        f"Order Time: {to_local(utcnow()):%Y-%m-%d %H:%M}",
        "",
        "Please confirm this order and provide payment details.",
        "",
        "Thank you!",
    ]
    return "\n".join(lines)


def order_notification(order: Order, admin_phone: Optional[str] = None) -> dict:
    """WhatsApp link for the shop owner; a failure dict if no phone is configured."""
    admin_phone = admin_phone or settings.WHATSAPP_PHONE
    if not admin_phone:
        logger.error("WhatsApp phone number not configured (WHATSAPP_PHONE)")
        return {"success": False, "error": "WhatsApp phone not configured"}

    return {
        "success": True,
        "url": build_whatsapp_link(admin_phone, format_order_message(order)),
        "message": "WhatsApp notification link generated",
    }


def cart_checkout_link(cart: Cart, admin_phone: Optional[str] = None) -> Optional[str]:
    admin_phone = admin_phone or settings.WHATSAPP_PHONE
    if not admin_phone:
        logger.error("WhatsApp phone number not configured (WHATSAPP_PHONE)")
        return None
    return build_whatsapp_link(admin_phone, format_cart_message(cart))

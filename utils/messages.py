"""
Centralized Spanish UI messages.
All user-facing text in Spanish for consistency.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Bienvenido {name}',
    'logout_success': 'Sesión cerrada correctamente',
    'cart_updated': 'Carrito actualizado',
    'cart_cleared': 'Carrito vaciado',
    'quotation_submitted': 'Hemos recibido tu solicitud. Te contactaremos pronto con una cotización personalizada.',
    'quotation_approved': 'Cotización aprobada',
    'quotation_rejected': 'Cotización rechazada',
    'reservation_created': 'Reserva creada exitosamente',
    'reservation_updated': 'Reserva actualizada a: {status}',
    'product_created': 'Producto creado exitosamente',
    'product_updated': 'Producto actualizado exitosamente',
    'product_deleted': 'Producto eliminado exitosamente',
    'category_created': 'Categoría creada exitosamente',
    'image_created': 'Imagen agregada exitosamente',
    'image_deleted': 'Imagen eliminada exitosamente',

    # Error messages
    'invalid_credentials': 'Usuario o contraseña incorrectos',
    'account_disabled': 'Su cuenta ha sido desactivada. Contacte al administrador.',
    'login_required': 'Debe iniciar sesión para acceder',
    'not_found': 'Recurso no encontrado',
    'method_not_allowed': 'Método no permitido',
    'internal_error': 'Error interno del servidor',
    'validation_failed': 'Revisa los datos del formulario',
    'capacity_exceeded': 'Solo hay {available} unidades disponibles para esta fecha',
    'capacity_exceeded_product': 'Solo hay {available} unidades de {product} disponibles para esta fecha',
    'duplicate_reservation': 'Esta cotización ya tiene una reserva asociada',
    'invalid_transition': 'No se puede cambiar el estado de {current} a {requested}',
    'persistence_error': 'No se pudo completar la operación. Intenta de nuevo.',
    'product_not_found': 'Producto no encontrado',
    'category_not_found': 'Categoría no encontrada',
    'quotation_not_found': 'Cotización no encontrada',
    'reservation_not_found': 'Reserva no encontrada',
    'image_not_found': 'Imagen no encontrada',
    'submission_in_progress': 'Tu cotización ya se está enviando',
    'json_required': 'Se requiere un cuerpo JSON',
    'availability_unconfirmed': 'No pudimos confirmar la disponibilidad para esta fecha. La revisaremos al preparar tu cotización.',
    'cart_over_capacity': 'Algunos productos superan la disponibilidad de la nueva fecha. Ajusta las cantidades.',

    # Validation messages
    'field_required': 'Este campo es requerido',
    'name_too_short': 'El nombre debe tener al menos 2 caracteres',
    'invalid_email': 'Email inválido',
    'invalid_phone': 'Teléfono inválido',
    'date_required': 'Selecciona una fecha',
    'invalid_date': 'Fecha inválida (formato AAAA-MM-DD)',
    'event_type_required': 'Selecciona el tipo de evento',
    'service_tier_required': 'Selecciona el tipo de servicio',
    'headcount_required': 'Indica el número de personas',
    'cart_empty': 'Agrega al menos un producto a tu cotización',
    'invalid_price': 'El precio debe ser un número mayor o igual a 0',
    'invalid_stock': 'El stock debe ser un número entero mayor o igual a 0',
    'invalid_quantity': 'La cantidad debe ser un número entero',
    'invalid_status': 'Estado inválido',
    'invalid_category': 'Categoría inválida',

    # Reservation states
    'state_pending': 'Pendiente',
    'state_confirmed': 'Confirmada',
    'state_completed': 'Completada',
    'state_cancelled': 'Cancelada',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message

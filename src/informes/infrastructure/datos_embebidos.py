# informes/infrastructure/datos_embebidos.py
#
# Conjunto de datos de muestra incluido con la aplicación. Se usa como último
# recurso cuando ni el JSON remoto ni la API backend están disponibles, y como
# almacén de credenciales de demostración.

USUARIOS = [
    {
        "id": 1,
        "usu_login": "copec_admin",
        "usu_activo": "SI",
        "clienteId": 57,
        "nombre": "Administrador COPEC",
        "email": "admin@copec.cl",
    },
    {
        "id": 2,
        "usu_login": "shell_admin",
        "usu_activo": "SI",
        "clienteId": 58,
        "nombre": "Operador SHELL",
        "email": "operador@shell.cl",
    },
    {
        "id": 3,
        "usu_login": "petrobras_admin",
        "usu_activo": "SI",
        "clienteId": 59,
        "nombre": "Supervisor PETROBRAS",
        "email": "supervisor@petrobras.cl",
    },
    {
        "id": 4,
        "usu_login": "copec_operador",
        "usu_activo": "NO",
        "clienteId": 57,
        "nombre": "Operador COPEC (baja)",
        "email": "operador@copec.cl",
    },
]

CLIENTES = [
    {
        "id": 57,
        "nombre": "COPEC",
        "rut": "99.500.000-1",
        "direccion": "Av. El Golf 150, Las Condes",
        "telefono": "+56 2 2461 7000",
        "email": "contacto@copec.cl",
        "tipo_cliente": "Estaciones de Servicio",
    },
    {
        "id": 58,
        "nombre": "SHELL",
        "rut": "96.800.570-7",
        "direccion": "Av. Apoquindo 3721, Las Condes",
        "telefono": "+56 2 2750 3000",
        "email": "info@shell.cl",
        "tipo_cliente": "Estaciones de Servicio",
    },
    {
        "id": 59,
        "nombre": "PETROBRAS",
        "rut": "96.511.310-2",
        "direccion": "Av. Vitacura 2939, Las Condes",
        "telefono": "+56 2 2422 5000",
        "email": "chile@petrobras.com",
        "tipo_cliente": "Estaciones de Servicio",
    },
]


def _guia(id_, guia, fecha, cliente_id, sucursal, frecuencia, limite, retirados, valor, patente, obs):
    return {
        "id": id_,
        "guia": guia,
        "fecha": fecha,
        "clienteId": cliente_id,
        "sucursal": sucursal,
        "servicio": "RESIDUOS SOLIDOS POR RETIRO",
        "frecuencia": frecuencia,
        "lts_limite": limite,
        "lts_retirados": retirados,
        "valor_servicio": valor,
        "valor_lt_adic": 0,
        "patente": patente,
        "total": valor,
        "observaciones": obs,
    }


GUIAS = [
    # COPEC (57)
    _guia(1, "112", "2025-07-01", 57, "COPEC PEDRO DE VALDIVIA", "MENSUAL", 3300, 3000, 88299, "ABC-123", "Retiro estación Pedro de Valdivia"),
    _guia(2, "117", "2025-07-01", 57, "COPEC LOS CARRERA", "MENSUAL", 1100, 4000, 93818, "DEF-456", "Retiro estación Los Carrera"),
    _guia(3, "114", "2025-07-01", 57, "COPEC PAICAVI", "MENSUAL", 2200, 3000, 79941, "GHI-789", "Retiro estación Paicavi"),
    _guia(4, "113", "2025-07-02", 57, "COPEC PALOMARES", "MENSUAL", 3300, 4500, 117612, "JKL-012", "Retiro estación Palomares"),
    _guia(5, "110", "2025-07-02", 57, "COPEC SAN CARLOS", "MENSUAL", 4400, 13000, 104735, "MNO-345", "Retiro estación San Carlos"),
    _guia(6, "118", "2025-07-02", 57, "COPEC LOS ANGELES SUR", "MENSUAL", 5500, 15500, 119691, "PQR-678", "Retiro estación Los Angeles Sur"),
    _guia(7, "120", "2025-07-02", 57, "COPEC LOS ANGELES CENTRO", "MENSUAL", 1100, 4000, 101256, "STU-901", "Retiro estación Los Angeles Centro"),
    _guia(8, "119", "2025-07-02", 57, "COPEC LOS ANGELES NORTE", "MENSUAL", 4400, 15000, 124250, "VWX-234", "Retiro estación Los Angeles Norte"),
    _guia(9, "109", "2025-07-02", 57, "COPEC TALCAHUANO", "MENSUAL", 2200, 4000, 90179, "YZA-567", "Retiro estación Talcahuano"),
    _guia(10, "125", "2025-07-03", 57, "COPEC ALEMANIA A", "MENSUAL", 2200, 4000, 44709, "BCD-890", "Retiro estación Alemania A"),
    _guia(11, "121", "2025-07-02", 57, "COPEC CONCEPCION", "MENSUAL", 3300, 7000, 108774, "EFG-123", "Retiro estación Concepción"),
    _guia(12, "116", "2025-07-02", 57, "COPEC MARQUINA", "MENSUAL", 4400, 6000, 119651, "HIJ-456", "Retiro estación Marquina"),
    _guia(13, "124", "2025-07-02", 57, "COPEC FREIRE", "MENSUAL", 5500, 14000, 110454, "KLM-789", "Retiro estación Freire"),
    _guia(14, "108", "2025-07-02", 57, "COPEC VICTORIA", "MENSUAL", 6600, 10000, 129929, "NOP-012", "Retiro estación Victoria"),
    _guia(15, "122", "2025-07-02", 57, "COPEC LAUTARO", "MENSUAL", 5500, 9000, 45949, "QRS-345", "Retiro estación Lautaro"),
    # SHELL (58)
    _guia(16, "SH001", "2025-07-05", 58, "SHELL PROVIDENCIA", "SEMANAL", 5000, 4800, 125000, "SHL-100", "Retiro estación Providencia"),
    _guia(17, "SH002", "2025-07-06", 58, "SHELL LAS CONDES", "SEMANAL", 6000, 5500, 145000, "SHL-200", "Retiro estación Las Condes"),
    # PETROBRAS (59)
    _guia(18, "PB001", "2025-07-07", 59, "PETROBRAS VITACURA", "QUINCENAL", 4000, 3800, 95000, "PTB-300", "Retiro estación Vitacura"),
    _guia(19, "PB002", "2025-07-08", 59, "PETROBRAS HUECHURABA", "QUINCENAL", 3500, 3200, 85000, "PTB-400", "Retiro estación Huechuraba"),
]


def _factura(id_, fecha, empresa, sucursal, rut, no_guia, dias_mora, nro_factura, cliente_id, monto, obs):
    return {
        "id": id_,
        "fecha": fecha,
        "empresa": empresa,
        "sucursal": sucursal,
        "rut": rut,
        "no_guia": no_guia,
        "dias_mora": dias_mora,
        "nro_factura": nro_factura,
        "fecha_factura": fecha,
        "clienteId": cliente_id,
        "monto_factura": monto,
        "observaciones": obs,
    }


FACTURAS_IMPAGAS = [
    # COPEC (57)
    _factura(1, "2025-06-15", "COPEC", "COPEC PEDRO DE VALDIVIA", "99.500.000-1", "90002", 45, "7658", 57, 88299, "Cliente no responde"),
    _factura(2, "2025-06-18", "COPEC", "COPEC LOS CARRERA", "99.500.000-1", "90734", 42, "7660", 57, 93818, "En proceso de cobranza"),
    _factura(3, "2025-06-20", "COPEC", "COPEC PAICAVI", "99.500.000-1", "90051", 40, "7662", 57, 79941, "Seguimiento telefónico"),
    _factura(4, "2025-07-01", "COPEC", "COPEC PALOMARES", "99.500.000-1", "90563", 29, "7665", 57, 117612, "Compromiso de pago"),
    _factura(5, "2025-07-05", "COPEC", "COPEC SAN CARLOS", "99.500.000-1", "90114", 25, "7668", 57, 104735, "Recibido"),
    _factura(6, "2025-05-10", "COPEC", "COPEC LOS ANGELES SUR", "99.500.000-1", "90157", 81, "7515", 57, 119691, "Derivado a cobranza judicial"),
    _factura(7, "2025-07-10", "COPEC", "COPEC CONCEPCION", "99.500.000-1", "90574", 20, "7675", 57, 108774, "En proceso"),
    # SHELL (58)
    _factura(8, "2025-06-25", "SHELL", "SHELL PROVIDENCIA", "96.800.570-7", "SH001", 35, "8100", 58, 125000, "Contactar gerencia"),
    _factura(9, "2025-07-15", "SHELL", "SHELL LAS CONDES", "96.800.570-7", "SH002", 15, "8105", 58, 145000, "Recordatorio enviado"),
    # PETROBRAS (59)
    _factura(10, "2025-04-20", "PETROBRAS", "PETROBRAS VITACURA", "96.511.310-2", "PB001", 101, "9200", 59, 95000, "Cuenta por cobrar problemática"),
]
